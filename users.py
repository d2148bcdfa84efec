#!/usr/bin/env python3
"""
Auth API - Registration, login, token refresh and profile management
"""

from datetime import datetime
from typing import Optional

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from pymongo.errors import DuplicateKeyError

from auth import (
    create_access_token,
    decode_refresh_token,
    generate_tokens,
    get_current_user,
    hash_password,
    verify_password,
)
from database import get_db
from logging_config import get_logger
from models import Preferences, user_helper

logger = get_logger(__name__)

# Create router
router = APIRouter(prefix="/api/auth", tags=["auth"])


# Pydantic Models
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    company: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None
    preferences: Optional[Preferences] = None
    avatar: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


# Routes

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db=Depends(get_db)):
    """Create an account and return it with a fresh token pair"""
    email = request.email.strip().lower()
    if db.users.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Email already registered")

    now = datetime.utcnow()
    user = {
        "email": email,
        "password": hash_password(request.password),
        "name": request.name.strip(),
        "role": "editor",
        "company": request.company,
        "avatar": None,
        "preferences": Preferences().model_dump(),
        "social_accounts": [],
        "created_at": now,
        "updated_at": now,
    }
    try:
        user["_id"] = db.users.insert_one(user).inserted_id
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info(f"Registered user {user['_id']}")
    return {
        "success": True,
        "data": {"user": user_helper(user), **generate_tokens(str(user["_id"]))},
    }


@router.post("/login")
async def login(request: LoginRequest, db=Depends(get_db)):
    user = db.users.find_one({"email": request.email.strip().lower()})
    if not user or not verify_password(request.password, user.get("password", "")):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "success": True,
        "data": {"user": user_helper(user), **generate_tokens(str(user["_id"]))},
    }


@router.post("/refresh")
async def refresh(request: RefreshRequest):
    """Exchange a refresh token for a new access token"""
    if not request.refresh_token:
        raise HTTPException(status_code=400, detail="Refresh token required")

    try:
        payload = decode_refresh_token(request.refresh_token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    return {"success": True, "data": {"access_token": create_access_token(payload["id"])}}


@router.get("/profile")
async def get_profile(user: dict = Depends(get_current_user)):
    return {"success": True, "data": {"user": user_helper(user)}}


@router.put("/profile")
async def update_profile(request: ProfileUpdate, user: dict = Depends(get_current_user), db=Depends(get_db)):
    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    if update_data.get("preferences") is None:
        update_data.pop("preferences", None)
    update_data["updated_at"] = datetime.utcnow()

    db.users.update_one({"_id": user["_id"]}, {"$set": update_data})
    updated = db.users.find_one({"_id": user["_id"]})
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    return {"success": True, "data": {"user": user_helper(updated)}}


@router.post("/change-password")
async def change_password(request: ChangePasswordRequest, user: dict = Depends(get_current_user), db=Depends(get_db)):
    stored = db.users.find_one({"_id": user["_id"]}, {"password": 1})
    if not stored:
        raise HTTPException(status_code=404, detail="User not found")

    if not verify_password(request.current_password, stored.get("password", "")):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {"password": hash_password(request.new_password), "updated_at": datetime.utcnow()}},
    )
    logger.info(f"Password changed for user {user['_id']}")
    return {"success": True, "message": "Password changed successfully"}
