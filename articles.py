#!/usr/bin/env python3
"""
Articles API - Upload, list, edit, generate and process news articles
"""

import math
import os
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel, Field

from agents import get_agent
from agents.prompts import describe_voice_style
from auth import get_current_user
from database import get_db, parse_object_id
from logging_config import get_logger
from models import ArticleStatus, article_helper, reformatted_content_helper, text_metadata
from platforms import DEFAULT_PROCESS_PLATFORMS, REFORMAT_PLATFORMS
from process_service import ProcessService, get_process_service
from role_helpers import authorize
from socket_service import manager
from text_extraction import ExtractionError, extract_text, source_type_for

logger = get_logger(__name__)

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
MIN_CONTENT_LENGTH = 50

ReformatPlatform = Literal["linkedin", "tiktok", "newsletter", "seo", "press-release", "twitter", "instagram"]

# Create router
router = APIRouter(prefix="/api/articles", tags=["articles"])


# Pydantic Models
class ArticleUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    brand_voice: Optional[str] = None


class ProcessArticleRequest(BaseModel):
    platforms: Optional[List[ReformatPlatform]] = None


class GenerateArticleRequest(BaseModel):
    title: str = Field(min_length=1)
    info: str = Field(min_length=1)
    brand_voice_id: Optional[str] = None


# Helpers
def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def _save_upload(file: UploadFile) -> dict:
    """Store an upload under UPLOAD_DIR and return its source_file record."""
    try:
        source_type = source_type_for(file.filename)
    except ExtractionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = await file.read()
    if len(data) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"File too large (max {MAX_UPLOAD_SIZE_MB} MB)")

    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4()}{Path(file.filename).suffix.lower()}"
    stored_path = UPLOAD_DIR / stored_name
    stored_path.write_bytes(data)

    try:
        text = extract_text(stored_path)
    except ExtractionError as e:
        stored_path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "source_type": source_type,
        "text": text,
        "source_file": {
            "original_name": file.filename,
            "stored_name": stored_name,
            "mime_type": file.content_type,
            "size": len(data),
        },
    }


def _owned_article(db, article_id: str, user: dict) -> dict:
    article = db.articles.find_one({"_id": parse_object_id(article_id, "article ID"), "uploaded_by": user["_id"]})
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


def _brand_voice_summary(db, brand_voice_id, owner_id, fields=("name",)) -> Optional[dict]:
    if not brand_voice_id:
        return None
    voice = db.brand_voices.find_one({"_id": brand_voice_id, "created_by": owner_id}, {field: 1 for field in fields})
    if not voice:
        return None
    return {"_id": str(voice["_id"]), **{field: voice.get(field) for field in fields}}


async def _run_processing(service: ProcessService, **kwargs):
    """Background wrapper: the service has already recorded and emitted the failure."""
    try:
        await service.start_processing(**kwargs)
    except Exception as e:
        logger.error(f"Processing error for article {kwargs.get('article_id')}: {e}")


# Routes

@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def upload_article(
    title: str = Form(...),
    content: Optional[str] = Form(None),
    source_url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Create an article from pasted text or an uploaded .txt/.pdf/.docx file"""
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    if content and len(content) < MIN_CONTENT_LENGTH:
        raise HTTPException(status_code=400, detail=f"Content must be at least {MIN_CONTENT_LENGTH} characters")
    if source_url and not _is_http_url(source_url):
        raise HTTPException(status_code=400, detail="Invalid source URL")

    source_type = "text"
    source_file = None
    final_content = content or ""

    if file is not None and file.filename:
        upload = await _save_upload(file)
        source_type = upload["source_type"]
        source_file = upload["source_file"]
        final_content = upload["text"]

    if not final_content.strip():
        raise HTTPException(status_code=400, detail="Content or a readable file is required")

    now = datetime.utcnow()
    article = {
        "title": title,
        "content": final_content,
        "original_content": final_content,
        "source_type": "url" if source_url else source_type,
        "source_url": source_url or None,
        "source_file": source_file,
        "uploaded_by": user["_id"],
        "metadata": text_metadata(final_content),
        "status": "pending",
        "brand_voice": None,
        "created_at": now,
        "updated_at": now,
    }
    article["_id"] = db.articles.insert_one(article).inserted_id

    await manager.emit(str(user["_id"]), "article:uploaded", {"article_id": str(article["_id"]), "title": title})
    logger.info(f"Article {article['_id']} uploaded by {user['_id']} ({article['source_type']})")

    return {"success": True, "data": {"article": article_helper(article)}}


@router.get("")
@router.get("/", include_in_schema=False)
async def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status: Optional[ArticleStatus] = None,
    search: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    query = {"uploaded_by": user["_id"]}
    if status:
        query["status"] = status
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"content": pattern}]

    total = db.articles.count_documents(query)
    docs = list(
        db.articles.find(query).sort("created_at", -1).skip((page - 1) * limit).limit(limit)
    )

    voice_ids = list({doc["brand_voice"] for doc in docs if doc.get("brand_voice")})
    voice_names = {
        voice["_id"]: voice.get("name")
        for voice in db.brand_voices.find({"_id": {"$in": voice_ids}, "created_by": user["_id"]}, {"name": 1})
    } if voice_ids else {}

    articles = []
    for doc in docs:
        voice_id = doc.get("brand_voice")
        voice = {"_id": str(voice_id), "name": voice_names[voice_id]} if voice_id in voice_names else None
        articles.append(article_helper(doc, brand_voice=voice))

    return {
        "success": True,
        "data": {
            "articles": articles,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        },
    }


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_article(request: GenerateArticleRequest, user: dict = Depends(get_current_user), db=Depends(get_db)):
    """Draft a new article with the LLM from a title and notes"""
    brand_voice = None
    if request.brand_voice_id:
        brand_voice = db.brand_voices.find_one({
            "_id": parse_object_id(request.brand_voice_id, "brand voice ID"),
            "created_by": user["_id"],
        })
        if not brand_voice:
            raise HTTPException(status_code=404, detail="Brand voice not found")

    generated = await get_agent("article_writer").execute({
        "title": request.title,
        "info": request.info,
        "system_prompt": brand_voice.get("system_prompt") if brand_voice else None,
        "voice_style": describe_voice_style(brand_voice),
    })
    generated = generated.strip()

    now = datetime.utcnow()
    article = {
        "title": request.title.strip(),
        "content": generated,
        "original_content": generated,
        "source_type": "generated",
        "source_url": None,
        "source_file": None,
        "uploaded_by": user["_id"],
        "metadata": text_metadata(generated),
        "status": "pending",
        "brand_voice": brand_voice["_id"] if brand_voice else None,
        "created_at": now,
        "updated_at": now,
    }
    article["_id"] = db.articles.insert_one(article).inserted_id

    await manager.emit(str(user["_id"]), "article:uploaded", {"article_id": str(article["_id"]), "title": article["title"]})
    logger.info(f"Generated article {article['_id']} for {user['_id']}")

    return {"success": True, "data": {"article": article_helper(article)}}


@router.get("/{article_id}")
async def get_article(article_id: str, user: dict = Depends(get_current_user), db=Depends(get_db)):
    article = _owned_article(db, article_id, user)
    voice = _brand_voice_summary(db, article.get("brand_voice"), user["_id"], fields=("name", "system_prompt"))
    reformatted = db.reformatted_content.find({"article_id": article["_id"]})

    return {
        "success": True,
        "data": {
            "article": article_helper(article, brand_voice=voice),
            "reformatted_content": [reformatted_content_helper(doc) for doc in reformatted],
        },
    }


@router.put("/{article_id}")
async def update_article(
    article_id: str,
    request: ArticleUpdate,
    user: dict = Depends(authorize("admin", "editor")),
    db=Depends(get_db),
):
    article = _owned_article(db, article_id, user)

    update_data = {"updated_at": datetime.utcnow()}
    if request.title:
        update_data["title"] = request.title.strip()
    if request.content:
        update_data["content"] = request.content
        metadata = text_metadata(request.content)
        update_data["metadata.word_count"] = metadata["word_count"]
        update_data["metadata.reading_time"] = metadata["reading_time"]
    if request.brand_voice:
        voice_id = parse_object_id(request.brand_voice, "brand voice ID")
        if not db.brand_voices.find_one({"_id": voice_id, "created_by": user["_id"]}, {"_id": 1}):
            raise HTTPException(status_code=404, detail="Brand voice not found")
        update_data["brand_voice"] = voice_id

    db.articles.update_one({"_id": article["_id"]}, {"$set": update_data})
    updated = db.articles.find_one({"_id": article["_id"]})

    return {"success": True, "data": {"article": article_helper(updated)}}


@router.delete("/{article_id}")
async def delete_article(article_id: str, user: dict = Depends(authorize("admin")), db=Depends(get_db)):
    article = db.articles.find_one_and_delete({
        "_id": parse_object_id(article_id, "article ID"),
        "uploaded_by": user["_id"],
    })
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")

    db.reformatted_content.delete_many({"article_id": article["_id"]})
    logger.info(f"Deleted article {article['_id']}")

    return {"success": True, "message": "Article deleted successfully"}


@router.post("/{article_id}/process")
async def process_article(
    article_id: str,
    background_tasks: BackgroundTasks,
    request: Optional[ProcessArticleRequest] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
    service: ProcessService = Depends(get_process_service),
):
    """Start the processing pipeline in the background and return its job id"""
    article = _owned_article(db, article_id, user)
    if article.get("status") == "processing":
        raise HTTPException(status_code=400, detail="Article is already being processed")

    platforms = request.platforms if request and request.platforms else None
    if not platforms:
        preferred = (user.get("preferences") or {}).get("default_platforms") or []
        platforms = [p for p in preferred if p in REFORMAT_PLATFORMS] or DEFAULT_PROCESS_PLATFORMS

    db.articles.update_one(
        {"_id": article["_id"]},
        {"$set": {"status": "processing", "updated_at": datetime.utcnow()}},
    )

    job_id = service.create_job(str(article["_id"]), str(user["_id"]), platforms)
    background_tasks.add_task(
        _run_processing,
        service,
        article_id=str(article["_id"]),
        content=article["content"],
        title=article["title"],
        brand_voice_id=str(article["brand_voice"]) if article.get("brand_voice") else None,
        platforms=platforms,
        user_id=str(user["_id"]),
        job_id=job_id,
    )

    return {
        "success": True,
        "message": "Processing started",
        "data": {"article_id": str(article["_id"]), "job_id": job_id, "platforms": platforms},
    }
