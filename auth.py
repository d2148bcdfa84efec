#!/usr/bin/env python3
"""
Authentication helpers: password hashing and JWT issue/verification.
Browser requests authenticate with an `Authorization: Bearer <token>` header;
the WebSocket relay passes the same access token as a query parameter.
"""

import os
import re
from datetime import datetime, timedelta
from typing import Any, Dict

import bcrypt
import jwt
from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from database import get_db, parse_object_id
from logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

JWT_SECRET = os.getenv("JWT_SECRET", "default-secret")
JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "refresh-secret")
JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "30d")
JWT_ALGORITHM = "HS256"
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


def parse_duration(value: str) -> timedelta:
    """Parse '7d', '12h', '30m', '45s' or a bare number of seconds."""
    match = re.fullmatch(r"\s*(\d+)\s*([smhdw]?)\s*", value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS.get(unit, "seconds"): int(amount)})


# --- Passwords ---

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


# --- Tokens ---

def create_access_token(user_id: str) -> str:
    payload = {
        "id": user_id,
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow() + parse_duration(JWT_EXPIRES_IN),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_refresh_token(user_id: str) -> str:
    payload = {
        "id": user_id,
        "type": "refresh",
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow() + parse_duration(JWT_REFRESH_EXPIRES_IN),
    }
    return jwt.encode(payload, JWT_REFRESH_SECRET, algorithm=JWT_ALGORITHM)


def generate_tokens(user_id: str) -> Dict[str, str]:
    return {
        "access_token": create_access_token(user_id),
        "refresh_token": create_refresh_token(user_id),
    }


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify an access token. Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])


def decode_refresh_token(token: str) -> Dict[str, Any]:
    payload = jwt.decode(token, JWT_REFRESH_SECRET, algorithms=[JWT_ALGORITHM])
    if payload.get("type") != "refresh":
        raise jwt.InvalidTokenError("Not a refresh token")
    return payload


# --- Dependencies ---

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),
    db=Depends(get_db),
) -> Dict[str, Any]:
    """
    Resolve the bearer token to a user document (without the password hash).
    Raises 401 for a missing, expired or invalid token, or an unknown user.
    """
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        user_id = parse_object_id(payload.get("id"), "token")
    except HTTPException:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = db.users.find_one({"_id": user_id}, {"password": 0})
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return user
