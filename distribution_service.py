#!/usr/bin/env python3
"""
Publishing to social platforms, newsletters and email.

LinkedIn posts go to the UGC API when LINKEDIN_ACCESS_TOKEN is set; every
other platform (and LinkedIn without a token) returns a simulated result.
Each attempt and each scheduled post is stored in the `distributions`
collection.
"""

import os
import time
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from bson import ObjectId
from dotenv import load_dotenv
from fastapi import Depends
from pymongo import ReturnDocument

from database import get_db
from logging_config import get_logger
from socket_service import manager

load_dotenv()

logger = get_logger(__name__)

LINKEDIN_UGC_URL = "https://api.linkedin.com/v2/ugcPosts"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class DistributionService:
    def __init__(self, db, events=None):
        self.db = db
        self.events = events or manager

    async def post_to_platform(
        self,
        content_id: str,
        platform: str,
        content: str,
        title: str,
        user_id: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Publish now. Emits started/completed/failed events; re-raises failures."""
        options = options or {}
        await self.events.emit(user_id, "distribution:started", {"platform": platform, "content_id": content_id})
        logger.info(f"Posting content {content_id} to {platform} for user {user_id}")

        try:
            if platform == "linkedin":
                result = await self._post_to_linkedin(content, title, options)
            elif platform == "twitter":
                result = self._post_to_twitter(content, title, options)
            elif platform == "facebook":
                result = self._post_to_facebook(content, title, options)
            elif platform == "instagram":
                result = self._post_to_instagram(content, options)
            elif platform == "newsletter":
                result = self._send_newsletter(content, title)
            elif platform == "email":
                result = self._send_email(content, title)
            else:
                raise ValueError(f"Unsupported platform: {platform}")
        except Exception as e:
            error = str(e) or "Unknown error"
            self._record(user_id, content_id, platform, title, content, options, status="failed", error=error)
            await self.events.emit(user_id, "distribution:failed", {
                "platform": platform,
                "content_id": content_id,
                "error": error,
            })
            logger.error(f"Posting to {platform} failed: {error}")
            raise

        self._record(
            user_id, content_id, platform, title, content, options,
            status="published", result=result, published_at=datetime.utcnow(),
        )
        await self.events.emit(user_id, "distribution:completed", {
            "platform": platform,
            "content_id": content_id,
            "result": result,
        })
        return result

    async def schedule_post(
        self,
        content_id: str,
        platform: str,
        scheduled_time: datetime,
        content: str,
        title: str,
        user_id: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Store a scheduled post. Nothing publishes it automatically."""
        record = self._record(
            user_id, content_id, platform, title, content, options or {},
            status="scheduled", scheduled_time=scheduled_time,
        )
        await self.events.emit(user_id, "distribution:scheduled", {"scheduled_post": record})
        return record

    def cancel_scheduled(self, post_id: ObjectId, user_id: str) -> Optional[Dict[str, Any]]:
        """Mark one of the user's scheduled posts cancelled. None when not found."""
        return self.db.distributions.find_one_and_update(
            {"_id": post_id, "user_id": ObjectId(user_id), "status": "scheduled"},
            {"$set": {"status": "cancelled", "updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def _record(
        self,
        user_id: str,
        content_id: str,
        platform: str,
        title: str,
        content: str,
        options: Dict[str, Any],
        status: str,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        scheduled_time: Optional[datetime] = None,
        published_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        now = datetime.utcnow()
        doc = {
            "user_id": ObjectId(user_id),
            "content_id": content_id,
            "platform": platform,
            "title": title,
            "content": content,
            "options": options,
            "status": status,
            "scheduled_time": scheduled_time,
            "published_at": published_at,
            "result": result,
            "error": error,
            "created_at": now,
            "updated_at": now,
        }
        doc["_id"] = self.db.distributions.insert_one(doc).inserted_id
        return doc

    # --- Platforms ---

    async def _post_to_linkedin(self, content: str, title: str, options: Dict[str, Any]) -> Dict[str, Any]:
        access_token = os.getenv("LINKEDIN_ACCESS_TOKEN")

        if not access_token:
            stamp = _epoch_ms()
            return {
                "success": True,
                "platform": "linkedin",
                "post_id": f"li_{stamp}",
                "url": f"https://www.linkedin.com/posts/{stamp}",
                "message": "LinkedIn post created (mock - no API key)",
            }

        payload = {
            "author": f"urn:li:person:{os.getenv('LINKEDIN_USER_ID')}",
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": content},
                    "shareMediaCategory": "NONE",
                },
            },
            "visibility": {
                "com.linkedin.ugc.MemberNetworkVisibility": (options.get("visibility") or "PUBLIC").upper(),
            },
        }

        async with httpx.AsyncClient(timeout=30) as http:
            response = await http.post(
                LINKEDIN_UGC_URL,
                json=payload,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            post_id = response.json().get("id") or response.headers.get("x-restli-id")

        return {
            "success": True,
            "platform": "linkedin",
            "post_id": post_id,
            "url": f"https://www.linkedin.com/posts/{post_id}",
        }

    def _post_to_twitter(self, content: str, title: str, options: Dict[str, Any]) -> Dict[str, Any]:
        stamp = _epoch_ms()
        result = {
            "success": True,
            "platform": "twitter",
            "post_id": f"tw_{stamp}",
            "url": f"https://twitter.com/i/web/status/{stamp}",
        }
        if not os.getenv("TWITTER_API_KEY"):
            result["message"] = "Tweet created (mock - no API key)"
        return result

    def _post_to_facebook(self, content: str, title: str, options: Dict[str, Any]) -> Dict[str, Any]:
        stamp = _epoch_ms()
        return {
            "success": True,
            "platform": "facebook",
            "post_id": f"fb_{stamp}",
            "url": f"https://facebook.com/posts/{stamp}",
            "message": "Facebook post created (mock)",
        }

    def _post_to_instagram(self, content: str, options: Dict[str, Any]) -> Dict[str, Any]:
        stamp = _epoch_ms()
        return {
            "success": True,
            "platform": "instagram",
            "post_id": f"ig_{stamp}",
            "url": f"https://instagram.com/p/{stamp}",
            "message": "Instagram post created (mock)",
        }

    def _send_newsletter(self, content: str, title: str) -> Dict[str, Any]:
        return {
            "success": True,
            "platform": "newsletter",
            "message": "Newsletter scheduled (mock)",
            "issue_id": f"nl_{_epoch_ms()}",
        }

    def _send_email(self, content: str, title: str) -> Dict[str, Any]:
        return {
            "success": True,
            "platform": "email",
            "message": "Email sent (mock)",
            "recipient_count": 0,
        }


def get_distribution_service(db=Depends(get_db)) -> DistributionService:
    """FastAPI dependency; tests override it to inject a recording emitter."""
    return DistributionService(db)
