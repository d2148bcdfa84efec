"""
Pytest configuration and shared fixtures for the newsroom API tests.
"""
import os
import tempfile

# Settings read at import time must be in place before the app is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["GOOGLE_API_KEY"] = ""
os.environ["LINKEDIN_ACCESS_TOKEN"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="newsroom-uploads-")

from datetime import datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

from app import app
from auth import create_access_token, hash_password
from database import ensure_indexes, get_db
from distribution_service import DistributionService, get_distribution_service
from models import Preferences
from process_service import ProcessService, get_process_service

SAMPLE_CONTENT = (
    "The city council approved the new transit budget on Tuesday evening. "
    "The plan funds road repairs, extended library hours and two new bus routes. "
    "Council members voted seven to two after a public hearing that lasted three hours."
)


class RecordingEmitter:
    """Stands in for the socket manager and keeps every emitted event."""

    def __init__(self):
        self.events = []

    async def emit(self, room, event, data, exclude=None):
        self.events.append((room, event, data))

    def names(self):
        return [event for _, event, _ in self.events]

    def of(self, name):
        return [data for _, event, data in self.events if event == name]


# ============================================================================
# Fixtures: Database & Services
# ============================================================================

@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    database = mongomock.MongoClient()["liquid_news_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def events():
    return RecordingEmitter()


@pytest.fixture
def process_service(db, events):
    return ProcessService(db, events=events)


@pytest.fixture
def distribution_service(db, events):
    return DistributionService(db, events=events)


@pytest.fixture
def client(db, process_service, distribution_service):
    """TestClient wired to the in-memory database and recording services."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_process_service] = lambda: process_service
    app.dependency_overrides[get_distribution_service] = lambda: distribution_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


# ============================================================================
# Fixtures: Users & Tokens
# ============================================================================

@pytest.fixture
def make_user(db):
    """Insert a user with the given role and return (user, auth headers)."""
    def _make_user(role="editor", email=None, password="password123"):
        now = datetime.utcnow()
        user = {
            "email": email or f"{role}-{len(list(db.users.find()))}@example.com",
            "password": hash_password(password),
            "name": f"{role.title()} User",
            "role": role,
            "company": None,
            "avatar": None,
            "preferences": Preferences().model_dump(),
            "social_accounts": [],
            "created_at": now,
            "updated_at": now,
        }
        user["_id"] = db.users.insert_one(user).inserted_id
        headers = {"Authorization": f"Bearer {create_access_token(str(user['_id']))}"}
        return user, headers

    return _make_user


@pytest.fixture
def editor(make_user):
    return make_user("editor")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def viewer(make_user):
    return make_user("viewer")


@pytest.fixture
def make_article(db):
    """Insert an article owned by the given user."""
    def _make_article(user, title="Council Approves Transit Budget", content=SAMPLE_CONTENT, **fields):
        now = datetime.utcnow()
        article = {
            "title": title,
            "content": content,
            "original_content": content,
            "source_type": "text",
            "source_url": None,
            "source_file": None,
            "uploaded_by": user["_id"],
            "metadata": {"word_count": len(content.split()), "reading_time": 1, "language": "en",
                         "topics": [], "sentiment": "neutral"},
            "status": "pending",
            "brand_voice": None,
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        article["_id"] = db.articles.insert_one(article).inserted_id
        return article

    return _make_article
