"""
Tests for /api/auth and the bearer token dependency
"""
from datetime import datetime, timedelta

import jwt
import pytest

from auth import JWT_ALGORITHM, JWT_SECRET, create_refresh_token, parse_duration


class TestRegisterAndLogin:

    def test_register_returns_user_and_tokens(self, client, db):
        response = client.post("/api/auth/register", json={
            "email": "Reporter@Example.com",
            "password": "password123",
            "name": "Reporter",
            "company": "Daily Planet",
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "reporter@example.com"
        assert data["user"]["role"] == "editor"
        assert "password" not in data["user"]
        assert data["access_token"] and data["refresh_token"]
        assert db.users.find_one({"email": "reporter@example.com"})["password"] != "password123"

    def test_register_duplicate_email(self, client, editor):
        user, _ = editor
        response = client.post("/api/auth/register", json={
            "email": user["email"], "password": "password123", "name": "Again",
        })
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Email already registered"}

    def test_register_short_password_is_400(self, client):
        response = client.post("/api/auth/register", json={
            "email": "short@example.com", "password": "short", "name": "Short",
        })
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_login(self, client, make_user):
        make_user("editor", email="login@example.com", password="secret-pass")
        response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "secret-pass"})
        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "login@example.com"

    @pytest.mark.parametrize("email,password", [
        ("login@example.com", "wrong-pass"),
        ("nobody@example.com", "secret-pass"),
    ])
    def test_login_invalid_credentials(self, client, make_user, email, password):
        make_user("editor", email="login@example.com", password="secret-pass")
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_long_password_register_and_login(self, client):
        password = "p" * 100
        response = client.post("/api/auth/register", json={
            "email": "long@example.com", "password": password, "name": "Long",
        })
        assert response.status_code == 201

        login = client.post("/api/auth/login", json={"email": "long@example.com", "password": password})
        assert login.status_code == 200

    def test_malformed_stored_hash_is_invalid_credentials(self, client, db, make_user):
        user, _ = make_user("editor", email="broken@example.com")
        db.users.update_one({"_id": user["_id"]}, {"$set": {"password": "not-a-bcrypt-hash"}})
        response = client.post("/api/auth/login", json={"email": "broken@example.com", "password": "password123"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


class TestTokens:

    def test_refresh_issues_access_token(self, client, editor):
        user, _ = editor
        response = client.post("/api/auth/refresh", json={"refresh_token": create_refresh_token(str(user["_id"]))})
        assert response.status_code == 200
        token = response.json()["data"]["access_token"]
        assert jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])["id"] == str(user["_id"])

    def test_refresh_requires_token(self, client):
        response = client.post("/api/auth/refresh", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Refresh token required"

    def test_access_token_is_not_a_refresh_token(self, client, editor):
        _, headers = editor
        access = headers["Authorization"].split()[1]
        response = client.post("/api/auth/refresh", json={"refresh_token": access})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid refresh token"

    def test_missing_token(self, client):
        response = client.get("/api/auth/profile")
        assert response.status_code == 401
        assert response.json()["error"] == "No token provided"

    def test_invalid_token(self, client):
        response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    def test_expired_token(self, client, editor):
        user, _ = editor
        token = jwt.encode(
            {"id": str(user["_id"]), "exp": datetime.utcnow() - timedelta(minutes=1)},
            JWT_SECRET, algorithm=JWT_ALGORITHM,
        )
        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Token expired"

    def test_deleted_user(self, client, db, editor):
        user, headers = editor
        db.users.delete_one({"_id": user["_id"]})
        response = client.get("/api/auth/profile", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"] == "User not found"

    @pytest.mark.parametrize("value,expected", [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45", timedelta(seconds=45)),
    ])
    def test_parse_duration(self, value, expected):
        assert parse_duration(value) == expected

    def test_parse_duration_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_duration("soon")


class TestProfile:

    def test_get_profile(self, client, editor):
        user, headers = editor
        response = client.get("/api/auth/profile", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["user"]["_id"] == str(user["_id"])

    def test_update_profile(self, client, editor):
        _, headers = editor
        response = client.put("/api/auth/profile", headers=headers, json={
            "name": "New Name",
            "preferences": {"notifications": False, "theme": "dark", "default_platforms": ["twitter"]},
        })
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["name"] == "New Name"
        assert user["preferences"]["theme"] == "dark"

    def test_change_password(self, client, make_user):
        _, headers = make_user("editor", email="pw@example.com", password="old-password")
        response = client.post("/api/auth/change-password", headers=headers, json={
            "current_password": "old-password", "new_password": "new-password",
        })
        assert response.status_code == 200

        login = client.post("/api/auth/login", json={"email": "pw@example.com", "password": "new-password"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, editor):
        _, headers = editor
        response = client.post("/api/auth/change-password", headers=headers, json={
            "current_password": "not-it", "new_password": "new-password",
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Current password is incorrect"

    def test_change_to_long_password(self, client, make_user):
        _, headers = make_user("editor", email="longpw@example.com", password="old-password")
        new_password = "ü" * 60
        response = client.post("/api/auth/change-password", headers=headers, json={
            "current_password": "old-password", "new_password": new_password,
        })
        assert response.status_code == 200

        login = client.post("/api/auth/login", json={"email": "longpw@example.com", "password": new_password})
        assert login.status_code == 200
