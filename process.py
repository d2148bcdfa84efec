#!/usr/bin/env python3
"""
Process API - Run and inspect the article processing pipeline
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from auth import get_current_user
from database import get_db, parse_object_id
from logging_config import get_logger
from models import reformatted_content_helper
from platforms import DEFAULT_PROCESS_PLATFORMS
from process_service import ProcessService, get_process_service
from role_helpers import verify_ownership
from task_manager import task_manager

logger = get_logger(__name__)

ReformatPlatform = Literal["linkedin", "tiktok", "newsletter", "seo", "press-release", "twitter", "instagram"]

# Create router
router = APIRouter(prefix="/api/process", tags=["process"])


# Pydantic Models
class StartProcessRequest(BaseModel):
    article_id: str
    platforms: Optional[List[ReformatPlatform]] = None
    brand_voice_id: Optional[str] = None


class ReformatRequest(BaseModel):
    content: str = Field(min_length=1)
    platform: ReformatPlatform
    brand_voice_id: Optional[str] = None


class FactCheckRequest(BaseModel):
    original_content: str = Field(min_length=1)
    reformatted_content: str = Field(min_length=1)


class OptimizeSeoRequest(BaseModel):
    content: str = Field(min_length=1)
    title: Optional[str] = None
    target_keywords: Optional[List[str]] = None
    target_audience: Optional[str] = None


def _validate_job_id(job_id: str) -> str:
    try:
        uuid.UUID(job_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid job ID")
    return job_id


def _owned_job(job_id: str, user: dict) -> dict:
    job = task_manager.get_job(_validate_job_id(job_id))
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    verify_ownership(job, user, "user_id", detail="Not authorized to access this job")
    return job


# Routes

@router.post("/start")
async def start_processing(
    request: StartProcessRequest,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
    service: ProcessService = Depends(get_process_service),
):
    """Run the full pipeline for an article and wait for it to finish"""
    article = db.articles.find_one({"_id": parse_object_id(request.article_id, "article ID")})
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    verify_ownership(article, user, "uploaded_by", detail="Not authorized to process this article")

    if request.brand_voice_id:
        parse_object_id(request.brand_voice_id, "brand voice ID")
    brand_voice_id = request.brand_voice_id or (str(article["brand_voice"]) if article.get("brand_voice") else None)
    platforms = request.platforms or DEFAULT_PROCESS_PLATFORMS

    db.articles.update_one(
        {"_id": article["_id"]},
        {"$set": {"status": "processing", "updated_at": datetime.utcnow()}},
    )

    job_id = await service.start_processing(
        article_id=str(article["_id"]),
        content=article["content"],
        title=article["title"],
        brand_voice_id=brand_voice_id,
        platforms=platforms,
        user_id=str(user["_id"]),
    )

    return {
        "success": True,
        "message": "Processing started",
        "data": {"job_id": job_id, "article_id": str(article["_id"]), "platforms": platforms},
    }


@router.get("/status/{job_id}")
async def get_status(job_id: str, user: dict = Depends(get_current_user)):
    job = _owned_job(job_id, user)
    return {
        "success": True,
        "data": {
            "job_id": job["job_id"],
            "article_id": job["article_id"],
            "status": job["status"],
            "progress": job["progress"],
            "current_step": job["current_step"],
            "agents": {agent: {"status": state} for agent, state in job["agent_status"].items()},
            "platforms": job["platforms"],
            "error": job["error"],
            "updated_at": job["updated_at"],
        },
    }


@router.get("/results/{article_id}")
async def get_results(
    article_id: str,
    platform: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    article = db.articles.find_one({"_id": parse_object_id(article_id, "article ID")})
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    verify_ownership(article, user, "uploaded_by")

    query = {"article_id": article["_id"]}
    if platform:
        query["platform"] = platform

    return {
        "success": True,
        "data": {
            "article": {"id": str(article["_id"]), "title": article["title"], "status": article.get("status")},
            "reformatted_content": [reformatted_content_helper(doc) for doc in db.reformatted_content.find(query)],
        },
    }


@router.post("/reformat")
async def reformat(
    request: ReformatRequest,
    user: dict = Depends(get_current_user),
    service: ProcessService = Depends(get_process_service),
):
    if request.brand_voice_id:
        parse_object_id(request.brand_voice_id, "brand voice ID")
    result = await service.reformat_content(request.content, request.platform, str(user["_id"]), request.brand_voice_id)
    return {"success": True, "data": result}


@router.post("/fact-check")
async def fact_check(
    request: FactCheckRequest,
    user: dict = Depends(get_current_user),
    service: ProcessService = Depends(get_process_service),
):
    result = await service.fact_check(request.original_content, request.reformatted_content)
    return {
        "success": True,
        "data": {"fact_check": {**result, "checked_at": datetime.utcnow().isoformat()}},
    }


@router.post("/optimize-seo")
async def optimize_seo(
    request: OptimizeSeoRequest,
    user: dict = Depends(get_current_user),
    service: ProcessService = Depends(get_process_service),
):
    result = await service.optimize_seo(
        request.content,
        title=request.title or "",
        target_keywords=request.target_keywords,
        target_audience=request.target_audience,
    )
    return {"success": True, "data": result}


@router.post("/cancel/{job_id}")
async def cancel_job(job_id: str, user: dict = Depends(get_current_user)):
    """Ask a running job to stop before its next phase"""
    job = _owned_job(job_id, user)
    task_manager.request_cancel(job["job_id"])
    logger.info(f"Cancellation requested for job {job['job_id']}")

    return {"success": True, "message": f"Job {job['job_id']} cancelled"}
