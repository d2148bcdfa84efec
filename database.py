#!/usr/bin/env python3
"""
MongoDB connection shared by every router and service.
"""

import os
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from dotenv import load_dotenv
from fastapi import HTTPException
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://127.0.0.1:27017/')
MONGODB_DB_NAME = os.getenv('MONGODB_DB_NAME', 'liquid_news')

# MongoClient connects lazily, so importing this module never blocks on the server
client = MongoClient(
    MONGODB_URI,
    maxPoolSize=int(os.getenv('MONGODB_MAX_POOL_SIZE', '10')),
    minPoolSize=int(os.getenv('MONGODB_MIN_POOL_SIZE', '2')),
    connectTimeoutMS=int(os.getenv('MONGODB_CONNECT_TIMEOUT', '10000')),
    socketTimeoutMS=int(os.getenv('MONGODB_SOCKET_TIMEOUT', '45000')),
)
db = client[MONGODB_DB_NAME]


def get_db():
    """FastAPI dependency returning the application database."""
    return db


def ensure_indexes(database):
    database.users.create_index("email", unique=True)
    database.articles.create_index([("uploaded_by", ASCENDING), ("created_at", DESCENDING)])
    database.brand_voices.create_index([("created_by", ASCENDING), ("name", ASCENDING)])
    database.reformatted_content.create_index(
        [("article_id", ASCENDING), ("platform", ASCENDING)], unique=True
    )
    database.distributions.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    database.distributions.create_index([("user_id", ASCENDING), ("status", ASCENDING)])


def get_connection_status(database) -> str:
    """Ping the server; returns 'connected' or 'disconnected'."""
    try:
        database.command("ping")
        return "connected"
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return "disconnected"


def masked_uri(uri: Optional[str] = None) -> str:
    """Hide credentials in a connection string before logging it."""
    uri = uri or MONGODB_URI
    if "@" not in uri:
        return uri
    scheme, rest = uri.split("//", 1)
    return f"{scheme}//***:***@{rest.split('@', 1)[1]}"


def parse_object_id(value: Optional[str], label: str = "ID") -> ObjectId:
    """Convert a path/body id to ObjectId or raise 400 'Invalid <label>'."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")
