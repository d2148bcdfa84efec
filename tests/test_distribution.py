"""
Tests for the distribution service and /api/distribute
"""
import pytest
from bson import ObjectId


@pytest.fixture
def reformatted(db, editor, make_article):
    user, _ = editor
    article = make_article(user)
    content_id = db.reformatted_content.insert_one({
        "article_id": article["_id"],
        "platform": "linkedin",
        "title": "LinkedIn title",
        "content": "LinkedIn post body",
    }).inserted_id
    return article, content_id


class TestDistributionService:

    @pytest.mark.asyncio
    async def test_post_records_and_emits(self, distribution_service, db, events, editor):
        user, _ = editor
        result = await distribution_service.post_to_platform(
            content_id="c1", platform="twitter", content="Hello", title="T", user_id=str(user["_id"]),
        )
        assert result["success"] is True
        assert result["post_id"].startswith("tw_")
        assert events.names() == ["distribution:started", "distribution:completed"]

        record = db.distributions.find_one({"content_id": "c1"})
        assert record["status"] == "published"
        assert record["published_at"] is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("platform,key,prefix", [
        ("linkedin", "post_id", "li_"),
        ("facebook", "post_id", "fb_"),
        ("instagram", "post_id", "ig_"),
        ("newsletter", "issue_id", "nl_"),
    ])
    async def test_simulated_platforms(self, distribution_service, editor, platform, key, prefix):
        user, _ = editor
        result = await distribution_service.post_to_platform(
            content_id="c1", platform=platform, content="Hello", title="T", user_id=str(user["_id"]),
        )
        assert result["platform"] == platform
        assert result[key].startswith(prefix)

    @pytest.mark.asyncio
    async def test_email(self, distribution_service, editor):
        user, _ = editor
        result = await distribution_service.post_to_platform(
            content_id="c1", platform="email", content="Hello", title="T", user_id=str(user["_id"]),
        )
        assert result["recipient_count"] == 0

    @pytest.mark.asyncio
    async def test_unsupported_platform_fails_loudly(self, distribution_service, db, events, editor):
        user, _ = editor
        with pytest.raises(ValueError):
            await distribution_service.post_to_platform(
                content_id="c1", platform="myspace", content="Hello", title="T", user_id=str(user["_id"]),
            )

        assert events.names() == ["distribution:started", "distribution:failed"]
        assert events.of("distribution:failed")[0]["error"] == "Unsupported platform: myspace"
        assert db.distributions.find_one({"content_id": "c1"})["status"] == "failed"


class TestDistributeRoute:

    def test_requires_content_or_article(self, client, editor):
        _, headers = editor
        response = client.post("/api/distribute", headers=headers, json={"platform": "linkedin"})
        assert response.status_code == 400
        assert response.json()["error"] == "Either content_id or article_id must be provided"

    def test_post_reformatted_content_now(self, client, editor, reformatted):
        _, headers = editor
        _, content_id = reformatted
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "linkedin",
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message"] == "Content posted to linkedin successfully"
        assert data["post_result"]["post_id"].startswith("li_")

    def test_post_article_directly(self, client, db, editor, make_article):
        user, headers = editor
        article = make_article(user)
        response = client.post("/api/distribute", headers=headers, json={
            "article_id": str(article["_id"]), "platform": "facebook",
        })
        assert response.status_code == 200
        assert db.distributions.find_one({"content_id": str(article["_id"])})["title"] == article["title"]

    def test_other_users_content_is_403(self, client, make_user, reformatted):
        _, headers = make_user("editor")
        _, content_id = reformatted
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "linkedin",
        })
        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to distribute this content"

    def test_missing_content_is_404(self, client, editor):
        _, headers = editor
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(ObjectId()), "platform": "linkedin",
        })
        assert response.status_code == 404
        assert response.json()["error"] == "Content not found"

    def test_invalid_platform(self, client, editor, reformatted):
        _, headers = editor
        _, content_id = reformatted
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "myspace",
        })
        assert response.status_code == 400

    def test_platform_failure_is_500(self, client, editor, reformatted, distribution_service, monkeypatch):
        _, headers = editor
        _, content_id = reformatted

        def broken(*args, **kwargs):
            raise RuntimeError("twitter is down")

        monkeypatch.setattr(distribution_service, "_post_to_twitter", broken)
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "twitter",
        })
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "twitter is down"}

    def test_schedule_then_cancel(self, client, db, editor, reformatted, events):
        _, headers = editor
        _, content_id = reformatted

        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "linkedin", "schedule_time": "2030-01-01T09:00:00Z",
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message"].startswith("Content scheduled for linkedin on 2030-01-01T09:00:00")
        assert data["scheduled_post"]["status"] == "scheduled"
        assert "distribution:scheduled" in events.names()

        scheduled = client.get("/api/distribute/scheduled", headers=headers).json()["data"]["scheduled_posts"]
        assert len(scheduled) == 1
        post_id = scheduled[0]["_id"]

        response = client.delete(f"/api/distribute/scheduled/{post_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Scheduled post cancelled"
        assert db.distributions.find_one({"_id": ObjectId(post_id)})["status"] == "cancelled"

        again = client.delete(f"/api/distribute/scheduled/{post_id}", headers=headers)
        assert again.status_code == 404

    def test_invalid_schedule_time(self, client, editor, reformatted):
        _, headers = editor
        _, content_id = reformatted
        response = client.post("/api/distribute", headers=headers, json={
            "content_id": str(content_id), "platform": "linkedin", "schedule_time": "next tuesday",
        })
        assert response.status_code == 400


class TestHistoryAndPlatforms:

    def test_history_filters_and_paginates(self, client, editor, reformatted):
        _, headers = editor
        _, content_id = reformatted
        for platform in ("linkedin", "twitter", "twitter"):
            client.post("/api/distribute", headers=headers, json={
                "content_id": str(content_id), "platform": platform,
            })

        data = client.get("/api/distribute/history?platform=twitter", headers=headers).json()["data"]
        assert [h["platform"] for h in data["history"]] == ["twitter", "twitter"]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}

        published = client.get("/api/distribute/history?status=published&limit=1", headers=headers).json()["data"]
        assert published["pagination"]["total"] == 3
        assert len(published["history"]) == 1

    def test_platform_catalog(self, client, editor):
        _, headers = editor
        platforms = client.get("/api/distribute/platforms", headers=headers).json()["data"]["platforms"]
        assert [p["id"] for p in platforms] == ["linkedin", "twitter", "facebook", "instagram", "newsletter"]
        by_id = {p["id"]: p for p in platforms}
        assert by_id["twitter"]["max_length"] == 280
        assert by_id["linkedin"]["connected"] is False
        assert by_id["newsletter"]["connected"] is True

    def test_connect_and_disconnect(self, client, db, editor):
        user, headers = editor

        response = client.post("/api/distribute/connect/twitter", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "twitter connected successfully (Simulation Mode)"
        assert response.json()["data"]["username"] == "@test_user_twitter"

        client.post("/api/distribute/connect/twitter", headers=headers, json={"username": "@metro"})
        accounts = db.users.find_one({"_id": user["_id"]})["social_accounts"]
        assert [(a["platform"], a["username"]) for a in accounts] == [("twitter", "@metro")]

        platforms = client.get("/api/distribute/platforms", headers=headers).json()["data"]["platforms"]
        twitter = next(p for p in platforms if p["id"] == "twitter")
        assert twitter["connected"] is True
        assert twitter["username"] == "@metro"

        response = client.delete("/api/distribute/disconnect/twitter", headers=headers)
        assert response.json()["message"] == "twitter disconnected successfully"
        assert db.users.find_one({"_id": user["_id"]})["social_accounts"] == []

    def test_connect_rejects_non_social_platform(self, client, editor):
        _, headers = editor
        response = client.post("/api/distribute/connect/newsletter", headers=headers)
        assert response.status_code == 400

    def test_oauth_callback_is_public(self, client):
        response = client.post("/api/distribute/callback/linkedin", json={"code": "abc"})
        assert response.status_code == 200
        assert response.json()["message"] == "linkedin connected successfully"
