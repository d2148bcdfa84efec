#!/usr/bin/env python3
"""
Article processing pipeline.

A run walks an article through research, authenticity detection, platform
reformatting, fact checking and SEO, one phase after another. Progress is
tracked in the task manager and pushed to the owner's socket room.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends

from agents import AGENT_REGISTRY, get_agent
from agents.llm_client import LLMClient
from agents.prompts import describe_voice_style, get_default_system_prompt, platform_override_prompt
from database import get_db
from logging_config import get_logger
from models import SENTIMENTS
from socket_service import manager
from task_manager import AGENTS, JobStatus, TaskManager, task_manager

logger = get_logger(__name__)


class ProcessCancelled(Exception):
    """Raised between phases when the job's cancellation flag is set."""


class ProcessService:
    def __init__(self, db, events=None, llm: Optional[LLMClient] = None, tasks: Optional[TaskManager] = None):
        self.db = db
        self.events = events or manager
        self.tasks = tasks or task_manager
        self.agents = {name: get_agent(name, llm) for name in AGENT_REGISTRY}

    # --- Entry points ---

    def create_job(self, article_id: str, user_id: str, platforms: List[str]) -> str:
        self.tasks.cleanup_old_jobs()
        job_id = str(uuid.uuid4())
        self.tasks.create_job(job_id, article_id, user_id, platforms)
        return job_id

    async def start_processing(
        self,
        article_id: str,
        content: str,
        title: str,
        brand_voice_id: Optional[str],
        platforms: List[str],
        user_id: str,
        job_id: Optional[str] = None,
    ) -> str:
        """Run every phase for one article. Returns the job id; re-raises phase errors."""
        job_id = job_id or self.create_job(article_id, user_id, platforms)
        article_oid = ObjectId(article_id)
        brand_voice = self._load_brand_voice(brand_voice_id, user_id)

        logger.info(f"Job {job_id}: processing article {article_id} for {', '.join(platforms)}")
        await self._emit_started(user_id, job_id, article_id, title)

        try:
            self._set_article_status(article_oid, "processing")

            await self._run_research_phase(user_id, job_id, article_oid, content)
            self._check_cancelled(job_id)

            await self._run_fake_news_phase(user_id, job_id, article_oid, content)
            self._check_cancelled(job_id)

            results = await self._run_reformat_phase(
                user_id, job_id, article_oid, content, title, platforms, brand_voice
            )
            self._check_cancelled(job_id)

            await self._run_fact_check_phase(user_id, job_id, article_oid, content, results)
            self._check_cancelled(job_id)

            await self._run_seo_phase(user_id, job_id, article_oid, results)

            self._set_article_status(article_oid, "completed")
            await self._emit_completed(user_id, job_id, article_id, results)
            logger.info(f"Job {job_id}: completed")
            return job_id

        except ProcessCancelled:
            self._set_article_status(article_oid, "pending")
            self.tasks.update_job(job_id, status=JobStatus.CANCELLED, current_step="Cancelled")
            await self.events.emit(user_id, "process:cancelled", {"job_id": job_id, "article_id": article_id})
            logger.info(f"Job {job_id}: cancelled")
            return job_id

        except Exception as e:
            self._set_article_status(article_oid, "failed")
            self.tasks.update_job(job_id, error=str(e) or "Unknown error")
            await self.events.emit(user_id, "process:failed", {"job_id": job_id, "error": str(e) or "Unknown error"})
            logger.error(f"Job {job_id}: failed: {e}", exc_info=True)
            raise

    async def reformat_content(self, content: str, platform: str, user_id: str, brand_voice_id: Optional[str] = None) -> Dict[str, Any]:
        """One-off reformat with no persistence."""
        brand_voice = self._load_brand_voice(brand_voice_id, user_id)
        reformatted = await self.agents["reformatter"].execute({
            "content": content,
            "title": "",
            "platform": platform,
            "system_prompt": self._system_prompt(brand_voice, platform),
            "voice_style": describe_voice_style(brand_voice),
        })
        return {
            "platform": platform,
            "title": reformatted["title"],
            "content": reformatted["content"],
            "word_count": reformatted["word_count"],
            "character_count": reformatted["character_count"],
            "hashtags": reformatted["hashtags"],
        }

    async def fact_check(self, original_content: str, reformatted_content: str) -> Dict[str, Any]:
        return await self.agents["fact_checker"].execute({
            "original_content": original_content,
            "reformatted_content": reformatted_content,
        })

    async def optimize_seo(
        self,
        content: str,
        title: str = "",
        target_keywords: Optional[List[str]] = None,
        target_audience: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.agents["seo_optimizer"].execute({
            "content": content,
            "title": title,
            "target_keywords": target_keywords,
            "target_audience": target_audience,
        })

    # --- Phases ---

    async def _run_research_phase(self, user_id: str, job_id: str, article_oid: ObjectId, content: str):
        await self._agent_status(user_id, job_id, "researcher", "running")

        research = await self.agents["researcher"].execute({"content": content})

        updates: Dict[str, Any] = {"updated_at": datetime.utcnow()}
        if isinstance(research.get("key_topics"), list):
            updates["metadata.topics"] = research["key_topics"]
        if research.get("sentiment") in SENTIMENTS:
            updates["metadata.sentiment"] = research["sentiment"]
        self.db.articles.update_one({"_id": article_oid}, {"$set": updates})

        await self._agent_status(user_id, job_id, "researcher", "completed")
        return research

    async def _run_fake_news_phase(self, user_id: str, job_id: str, article_oid: ObjectId, content: str):
        # Authenticity runs under the fact checker's status light
        await self._agent_status(user_id, job_id, "fact_checker", "running")
        await self._progress(
            user_id, job_id, str(article_oid), 25,
            "Analyzing content for authenticity and fake news indicators...",
        )

        article = self.db.articles.find_one({"_id": article_oid}, {"source_url": 1}) or {}
        detection = await self.agents["fake_news_detector"].execute({
            "content": content,
            "source_url": article.get("source_url"),
        })

        self.db.articles.update_one(
            {"_id": article_oid},
            {"$set": {
                "fake_news_detection": {**detection, "analyzed_at": datetime.utcnow()},
                "updated_at": datetime.utcnow(),
            }},
        )

        await self._agent_status(user_id, job_id, "fact_checker", "completed")
        return detection

    async def _run_reformat_phase(
        self,
        user_id: str,
        job_id: str,
        article_oid: ObjectId,
        content: str,
        title: str,
        platforms: List[str],
        brand_voice: Optional[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        await self._agent_status(user_id, job_id, "reformatter", "running")

        voice_style = describe_voice_style(brand_voice)
        results = []
        for index, platform in enumerate(platforms):
            await self._progress(user_id, job_id, str(article_oid), 30 + index * 10, f"Formatting for {platform}...")

            reformatted = await self.agents["reformatter"].execute({
                "content": content,
                "title": title,
                "platform": platform,
                "system_prompt": self._system_prompt(brand_voice, platform),
                "voice_style": voice_style,
            })
            results.append({"platform": platform, **reformatted})

        now = datetime.utcnow()
        for result in results:
            self.db.reformatted_content.update_one(
                {"article_id": article_oid, "platform": result["platform"]},
                {
                    "$set": {
                        "title": result["title"],
                        "content": result["content"],
                        "metadata": {
                            "word_count": result["word_count"],
                            "character_count": result["character_count"],
                            "hashtags": result["hashtags"],
                            "mentions": [],
                            "call_to_action": result.get("call_to_action"),
                        },
                        "updated_at": now,
                    },
                    "$setOnInsert": {"created_at": now},
                },
                upsert=True,
            )

        await self._agent_status(user_id, job_id, "reformatter", "completed")
        return results

    async def _run_fact_check_phase(
        self,
        user_id: str,
        job_id: str,
        article_oid: ObjectId,
        original_content: str,
        results: List[Dict[str, Any]],
    ):
        await self._agent_status(user_id, job_id, "fact_checker", "running")

        for result in results:
            verification = await self.fact_check(original_content, result["content"])
            self.db.reformatted_content.update_one(
                {"article_id": article_oid, "platform": result["platform"]},
                {"$set": {
                    "fact_check": {
                        "verification_status": verification["verification_status"],
                        "is_verified": verification["is_verified"],
                        "verification_score": verification["verification_score"],
                        "discrepancies": verification["discrepancies"],
                        "extracted_facts": verification["extracted_facts"],
                        "claims": verification["claims"],
                        "missing_facts": verification["missing_facts"],
                        "overall_summary": verification["overall_summary"],
                        "verified_at": datetime.utcnow(),
                    },
                    "updated_at": datetime.utcnow(),
                }},
            )

        await self._agent_status(user_id, job_id, "fact_checker", "completed")

    async def _run_seo_phase(self, user_id: str, job_id: str, article_oid: ObjectId, results: List[Dict[str, Any]]):
        await self._agent_status(user_id, job_id, "seo_optimizer", "running")

        seo_result = next((r for r in results if r["platform"] == "seo"), None)
        if seo_result:
            seo = await self.optimize_seo(seo_result["content"], seo_result["title"])
            self.db.reformatted_content.update_one(
                {"article_id": article_oid, "platform": "seo"},
                {"$set": {
                    "seo": {
                        "meta_title": seo.get("meta_title"),
                        "meta_description": seo.get("meta_description"),
                        "keywords": seo.get("keywords", []),
                        "slug": seo.get("slug"),
                    },
                    "updated_at": datetime.utcnow(),
                }},
            )

        await self._agent_status(user_id, job_id, "seo_optimizer", "completed")

    # --- Helpers ---

    def _load_brand_voice(self, brand_voice_id: Optional[str], user_id: str) -> Optional[Dict[str, Any]]:
        """The voice, only when it belongs to the requesting user."""
        if not brand_voice_id:
            return None
        try:
            return self.db.brand_voices.find_one({"_id": ObjectId(brand_voice_id), "created_by": ObjectId(user_id)})
        except (InvalidId, TypeError):
            return None

    @staticmethod
    def _system_prompt(brand_voice: Optional[Dict[str, Any]], platform: str) -> str:
        system_prompt = (brand_voice or {}).get("system_prompt") or get_default_system_prompt(platform)
        override = platform_override_prompt(brand_voice, platform)
        if override:
            system_prompt = f"{system_prompt}\n\n{override}"
        return system_prompt

    def _set_article_status(self, article_oid: ObjectId, status: str):
        self.db.articles.update_one(
            {"_id": article_oid},
            {"$set": {"status": status, "updated_at": datetime.utcnow()}},
        )

    def _check_cancelled(self, job_id: str):
        if self.tasks.is_cancel_requested(job_id):
            raise ProcessCancelled(job_id)

    async def _agent_status(self, user_id: str, job_id: str, agent: str, status: str):
        self.tasks.set_agent_status(job_id, agent, status)
        await self.events.emit(user_id, "agent:status", {"agent": agent, "status": status})

    async def _progress(self, user_id: str, job_id: str, article_id: str, progress: int, step: str):
        self.tasks.update_job(job_id, status=JobStatus.PROCESSING, progress=progress, current_step=step)
        await self.events.emit(user_id, "process:update", {
            "job_id": job_id,
            "article_id": article_id,
            "status": "processing",
            "progress": progress,
            "current_step": step,
        })

    async def _emit_started(self, user_id: str, job_id: str, article_id: str, title: str):
        data = {"job_id": job_id, "article_id": article_id, "title": title}
        self.tasks.update_job(job_id, status=JobStatus.PROCESSING, progress=10, current_step="Initializing agents...")
        await self.events.emit(user_id, "process:started", data)
        await self.events.emit(user_id, "process:update", {
            **data,
            "status": "processing",
            "progress": 10,
            "current_step": "Initializing agents...",
            "agent_status": {agent: "pending" for agent in AGENTS},
        })

    async def _emit_completed(self, user_id: str, job_id: str, article_id: str, results: List[Dict[str, Any]]):
        data = {"job_id": job_id, "article_id": article_id, "results": results}
        self.tasks.update_job(job_id, status=JobStatus.COMPLETED, progress=100, current_step="Processing complete!")
        await self.events.emit(user_id, "process:update", {
            **data,
            "status": "completed",
            "progress": 100,
            "current_step": "Processing complete!",
        })
        await self.events.emit(user_id, "process:completed", data)


def get_process_service(db=Depends(get_db)) -> ProcessService:
    """FastAPI dependency; tests override it to inject a recording emitter."""
    return ProcessService(db)
