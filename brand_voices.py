#!/usr/bin/env python3
"""
Brand Voices API - Manage the editorial voices used when reformatting content
"""

from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from pymongo import ReturnDocument

from agents import get_agent
from auth import get_current_user
from database import get_db, parse_object_id
from logging_config import get_logger
from models import PlatformOverride, Style, Tone, brand_voice_helper
from role_helpers import authorize

logger = get_logger(__name__)

# Create router
router = APIRouter(prefix="/api/brand-voices", tags=["brand-voices"])


# Starter voices users can copy into their own collection
DEFAULT_VOICES = {
    "professional": {
        "name": "Professional News",
        "description": "Formal, authoritative tone for serious news coverage",
        "system_prompt": (
            "You are a professional news editor for a major news outlet. Your writing is:\n"
            "- Formal and authoritative\n"
            "- Factual and objective\n"
            "- Clear and precise\n"
            "- Free of emotional language\n"
            "- Structured with inverted pyramid style\n"
            "Always maintain journalistic integrity and accuracy."
        ),
        "tone": {"formality": "formal", "sentiment": "neutral", "energy": "medium"},
        "style": {"sentence_length": "medium", "vocabulary": "moderate", "use_emojis": False, "use_hashtags": False},
        "keywords": [],
        "phrases_to_use": ["According to sources", "In a statement", "Official figures show"],
        "phrases_to_avoid": ["Amazing", "Incredible", "Shockingly"],
        "platform_overrides": [],
    },
    "casual": {
        "name": "Casual News",
        "description": "Friendly, engaging tone for younger audiences",
        "system_prompt": (
            "You are a friendly news content creator who makes news engaging and accessible. Your writing is:\n"
            "- Conversational and relatable\n"
            "- Engaging with hooks and questions\n"
            "- Uses emojis appropriately\n"
            "- Breaks down complex topics\n"
            "- Maintains accuracy while being approachable\n"
            "Make the news feel like it is coming from a knowledgeable friend."
        ),
        "tone": {"formality": "casual", "sentiment": "positive", "energy": "high"},
        "style": {"sentence_length": "short", "vocabulary": "simple", "use_emojis": True, "use_hashtags": True},
        "keywords": [],
        "phrases_to_use": ["Here's the thing", "You might be wondering", "The bottom line"],
        "phrases_to_avoid": ["Hitherto", "Moreover", "Consequently"],
        "platform_overrides": [],
    },
    "tech": {
        "name": "Tech News",
        "description": "Modern, innovative tone for technology coverage",
        "system_prompt": (
            "You are a tech journalist covering the latest in technology and innovation. Your writing is:\n"
            "- Forward-thinking and tech-savvy\n"
            "- Explains technical concepts clearly\n"
            "- Highlights innovation and impact\n"
            "- Uses current tech terminology\n"
            "- Balanced between excitement and skepticism\n"
            "Help readers understand how technology affects their lives."
        ),
        "tone": {"formality": "semi-formal", "sentiment": "neutral", "energy": "high"},
        "style": {"sentence_length": "medium", "vocabulary": "moderate", "use_emojis": True, "use_hashtags": True},
        "keywords": ["AI", "machine learning", "innovation", "digital transformation"],
        "phrases_to_use": ["Game-changing", "Disrupting the industry", "Cutting-edge"],
        "phrases_to_avoid": ["Old-fashioned", "Behind the times"],
        "platform_overrides": [],
    },
}


# Pydantic Models
class BrandVoiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    system_prompt: str = Field(min_length=1)
    tone: Tone = Field(default_factory=Tone)
    style: Style = Field(default_factory=Style)
    keywords: List[str] = []
    phrases_to_use: List[str] = []
    phrases_to_avoid: List[str] = []
    platform_overrides: List[PlatformOverride] = []
    is_default: bool = False


class BrandVoiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, min_length=1)
    tone: Optional[Tone] = None
    style: Optional[Style] = None
    keywords: Optional[List[str]] = None
    phrases_to_use: Optional[List[str]] = None
    phrases_to_avoid: Optional[List[str]] = None
    platform_overrides: Optional[List[PlatformOverride]] = None
    is_default: Optional[bool] = None


class TemplateRequest(BaseModel):
    template: Literal["professional", "casual", "tech"]
    name: Optional[str] = None
    description: Optional[str] = None


class VoiceTestRequest(BaseModel):
    content: Optional[str] = None


# Routes

@router.get("")
@router.get("/", include_in_schema=False)
async def list_brand_voices(user: dict = Depends(get_current_user), db=Depends(get_db)):
    """The user's voices, defaults first, then by name"""
    voices = db.brand_voices.find({"created_by": user["_id"]}).sort([("is_default", -1), ("name", 1)])
    return {"success": True, "data": {"voices": [brand_voice_helper(v) for v in voices]}}


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_brand_voice(
    request: BrandVoiceCreate,
    user: dict = Depends(authorize("admin", "editor")),
    db=Depends(get_db),
):
    now = datetime.utcnow()
    voice = {
        **request.model_dump(),
        "name": request.name.strip(),
        "created_by": user["_id"],
        "created_at": now,
        "updated_at": now,
    }
    voice["_id"] = db.brand_voices.insert_one(voice).inserted_id
    logger.info(f"Created brand voice {voice['_id']} for {user['_id']}")

    return {"success": True, "data": {"voice": brand_voice_helper(voice)}}


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def create_from_template(
    request: TemplateRequest,
    user: dict = Depends(authorize("admin", "editor")),
    db=Depends(get_db),
):
    """Copy one of the starter voices into the user's collection"""
    template = DEFAULT_VOICES.get(request.template)
    if not template:
        raise HTTPException(status_code=400, detail="Invalid template")

    now = datetime.utcnow()
    voice = {
        **template,
        "name": request.name or template["name"],
        "description": request.description or template["description"],
        "keywords": list(template["keywords"]),
        "phrases_to_use": list(template["phrases_to_use"]),
        "phrases_to_avoid": list(template["phrases_to_avoid"]),
        "platform_overrides": [],
        "tone": dict(template["tone"]),
        "style": dict(template["style"]),
        "created_by": user["_id"],
        "is_default": False,
        "created_at": now,
        "updated_at": now,
    }
    voice["_id"] = db.brand_voices.insert_one(voice).inserted_id

    return {
        "success": True,
        "data": {"voice": brand_voice_helper(voice)},
        "message": f'Created brand voice from "{request.template}" template',
    }


@router.get("/{voice_id}")
async def get_brand_voice(voice_id: str, user: dict = Depends(get_current_user), db=Depends(get_db)):
    voice = db.brand_voices.find_one({
        "_id": parse_object_id(voice_id, "brand voice ID"),
        "created_by": user["_id"],
    })
    if not voice:
        raise HTTPException(status_code=404, detail="Brand voice not found")

    return {"success": True, "data": {"voice": brand_voice_helper(voice)}}


@router.put("/{voice_id}")
async def update_brand_voice(
    voice_id: str,
    request: BrandVoiceUpdate,
    user: dict = Depends(authorize("admin", "editor")),
    db=Depends(get_db),
):
    voice_oid = parse_object_id(voice_id, "brand voice ID")

    update_data = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    update_data["updated_at"] = datetime.utcnow()

    voice = db.brand_voices.find_one_and_update(
        {"_id": voice_oid, "created_by": user["_id"]},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER,
    )
    if not voice:
        raise HTTPException(status_code=404, detail="Brand voice not found")

    return {"success": True, "data": {"voice": brand_voice_helper(voice)}}


@router.delete("/{voice_id}")
async def delete_brand_voice(voice_id: str, user: dict = Depends(authorize("admin")), db=Depends(get_db)):
    """Delete a voice. Default voices are protected."""
    voice = db.brand_voices.find_one_and_delete({
        "_id": parse_object_id(voice_id, "brand voice ID"),
        "created_by": user["_id"],
        "is_default": False,
    })
    if not voice:
        raise HTTPException(status_code=404, detail="Brand voice not found or cannot be deleted")

    logger.info(f"Deleted brand voice {voice['_id']}")
    return {"success": True, "message": "Brand voice deleted successfully"}


@router.post("/{voice_id}/test")
async def test_brand_voice(
    voice_id: str,
    request: VoiceTestRequest,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Preview a voice by rewriting sample content"""
    voice_oid = parse_object_id(voice_id, "brand voice ID")
    if not request.content or not request.content.strip():
        raise HTTPException(status_code=400, detail="Test content is required")

    voice = db.brand_voices.find_one({"_id": voice_oid, "created_by": user["_id"]})
    if not voice:
        raise HTTPException(status_code=404, detail="Brand voice not found")

    transformed = await get_agent("voice_tester").execute({"voice": voice, "content": request.content})

    return {
        "success": True,
        "data": {
            "original": request.content,
            "transformed": transformed,
            "voice": {"id": str(voice["_id"]), "name": voice["name"]},
        },
    }
