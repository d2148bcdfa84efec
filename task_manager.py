#!/usr/bin/env python3
"""
Processing job tracking
Holds the in-memory state of each article processing run so the status
endpoint and the socket relay can report progress and request cancellation.
"""

from typing import Dict, Any, List, Optional
from datetime import datetime, timedelta
from enum import Enum
import threading

AGENTS = ["researcher", "reformatter", "fact_checker", "seo_optimizer"]


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


FINISHED = [JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED]


class TaskManager:
    """Singleton tracker for processing jobs"""
    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._jobs = {}
        return cls._instance

    def create_job(self, job_id: str, article_id: str, user_id: str, platforms: List[str]) -> Dict[str, Any]:
        """Register a new job in pending state"""
        now = datetime.utcnow().isoformat()
        job = {
            "job_id": job_id,
            "article_id": article_id,
            "user_id": user_id,
            "platforms": list(platforms),
            "status": JobStatus.PENDING,
            "progress": 0,
            "current_step": "Queued",
            "agent_status": {agent: "pending" for agent in AGENTS},
            "cancel_requested": False,
            "error": None,
            "created_at": now,
            "updated_at": now,
        }
        self._jobs[job_id] = job
        return job

    def update_job(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        progress: Optional[int] = None,
        current_step: Optional[str] = None,
        error: Optional[str] = None
    ):
        """Update job status and progress"""
        if job_id not in self._jobs:
            return None

        job = self._jobs[job_id]

        if status is not None:
            job["status"] = status
        if progress is not None:
            job["progress"] = min(100, max(0, progress))
        if current_step is not None:
            job["current_step"] = current_step
        if error is not None:
            job["error"] = error
            job["status"] = JobStatus.FAILED

        job["updated_at"] = datetime.utcnow().isoformat()

        return job

    def set_agent_status(self, job_id: str, agent: str, status: str):
        job = self._jobs.get(job_id)
        if job:
            job["agent_status"][agent] = status
            job["updated_at"] = datetime.utcnow().isoformat()
        return job

    def request_cancel(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Flag a running job for cancellation; it stops before its next phase"""
        job = self._jobs.get(job_id)
        if job and job["status"] not in FINISHED:
            job["cancel_requested"] = True
            job["updated_at"] = datetime.utcnow().isoformat()
        return job

    def is_cancel_requested(self, job_id: str) -> bool:
        job = self._jobs.get(job_id)
        return bool(job and job["cancel_requested"])

    def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Get job state"""
        return self._jobs.get(job_id)

    def cleanup_old_jobs(self, max_age_hours: int = 24):
        """Clean up finished jobs older than specified hours"""
        cutoff = datetime.utcnow() - timedelta(hours=max_age_hours)
        to_delete = []

        for job_id, job in self._jobs.items():
            job_time = datetime.fromisoformat(job["updated_at"])
            if job_time < cutoff and job["status"] in FINISHED:
                to_delete.append(job_id)

        for job_id in to_delete:
            del self._jobs[job_id]

        return len(to_delete)


# Global instance
task_manager = TaskManager()
