#!/usr/bin/env python3
"""
Shared document shapes and MongoDB -> JSON helpers for the newsroom collections.
"""

import math
from typing import Any, Dict, List, Literal, Optional
from bson import ObjectId
from pydantic import BaseModel, Field

ArticleStatus = Literal["pending", "processing", "completed", "failed"]
SENTIMENTS = ["positive", "negative", "neutral"]


# --- Brand voice sub-documents ---

class Tone(BaseModel):
    formality: Literal["formal", "semi-formal", "casual"] = "semi-formal"
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"
    energy: Literal["high", "medium", "low"] = "medium"


class Style(BaseModel):
    sentence_length: Literal["short", "medium", "long"] = "medium"
    vocabulary: Literal["simple", "moderate", "complex"] = "moderate"
    use_emojis: bool = False
    use_hashtags: bool = True


class PlatformOverride(BaseModel):
    platform: str = Field(min_length=1)
    custom_prompt: Optional[str] = None


# --- User sub-documents ---

class Preferences(BaseModel):
    notifications: bool = True
    theme: Literal["light", "dark", "system"] = "system"
    default_platforms: List[str] = Field(default_factory=lambda: ["linkedin", "newsletter"])


# --- Helpers ---

def _id(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, ObjectId) else value


def _stringify(value: Any) -> Any:
    """Recursively convert ObjectIds inside embedded blobs."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    return value


def user_helper(user) -> dict:
    """Convert MongoDB user to dict. The password hash never leaves this layer."""
    return {
        "_id": str(user["_id"]),
        "email": user["email"],
        "name": user["name"],
        "role": user.get("role", "editor"),
        "company": user.get("company"),
        "avatar": user.get("avatar"),
        "preferences": user.get("preferences", Preferences().model_dump()),
        "social_accounts": [
            {k: v for k, v in account.items() if k != "access_token"}
            for account in user.get("social_accounts", [])
        ],
        "created_at": user.get("created_at"),
        "updated_at": user.get("updated_at"),
    }


def article_helper(doc, brand_voice: Optional[dict] = None) -> dict:
    article = {
        "_id": str(doc["_id"]),
        "title": doc["title"],
        "content": doc["content"],
        "original_content": doc.get("original_content", doc["content"]),
        "source_type": doc.get("source_type", "text"),
        "source_url": doc.get("source_url"),
        "source_file": doc.get("source_file"),
        "uploaded_by": _id(doc.get("uploaded_by")),
        "metadata": doc.get("metadata", {}),
        "status": doc.get("status", "pending"),
        "brand_voice": _id(doc.get("brand_voice")),
        "fake_news_detection": _stringify(doc.get("fake_news_detection")),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }
    if brand_voice is not None:
        article["brand_voice"] = brand_voice
    return article


def brand_voice_helper(doc) -> dict:
    return {
        "_id": str(doc["_id"]),
        "name": doc["name"],
        "description": doc.get("description"),
        "system_prompt": doc["system_prompt"],
        "tone": doc.get("tone", Tone().model_dump()),
        "style": doc.get("style", Style().model_dump()),
        "keywords": doc.get("keywords", []),
        "phrases_to_use": doc.get("phrases_to_use", []),
        "phrases_to_avoid": doc.get("phrases_to_avoid", []),
        "platform_overrides": doc.get("platform_overrides", []),
        "created_by": _id(doc.get("created_by")),
        "is_default": doc.get("is_default", False),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


def reformatted_content_helper(doc) -> dict:
    return {
        "_id": str(doc["_id"]),
        "article_id": _id(doc["article_id"]),
        "platform": doc["platform"],
        "title": doc.get("title", ""),
        "content": doc.get("content", ""),
        "excerpt": doc.get("excerpt"),
        "metadata": doc.get("metadata", {}),
        "fact_check": _stringify(doc.get("fact_check", {
            "verification_status": "needs_review",
            "is_verified": False,
            "verification_score": 0,
            "discrepancies": [],
            "extracted_facts": [],
            "claims": [],
            "missing_facts": [],
            "overall_summary": "",
        })),
        "seo": doc.get("seo"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


def distribution_helper(doc) -> dict:
    return {
        "_id": str(doc["_id"]),
        "user_id": _id(doc["user_id"]),
        "content_id": doc.get("content_id"),
        "platform": doc["platform"],
        "title": doc.get("title", ""),
        "status": doc["status"],
        "scheduled_time": doc.get("scheduled_time"),
        "published_at": doc.get("published_at"),
        "result": _stringify(doc.get("result")),
        "error": doc.get("error"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


def text_metadata(content: str) -> Dict[str, Any]:
    """Word count and reading time (200 wpm, rounded up) for a new article."""
    word_count = len(content.split())
    return {
        "word_count": word_count,
        "reading_time": math.ceil(word_count / 200),
        "language": "en",
        "topics": [],
        "sentiment": "neutral",
    }
