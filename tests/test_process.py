"""
Tests for the processing pipeline and /api/process
"""
import uuid
from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from platforms import DEFAULT_PROCESS_PLATFORMS
from process_service import ProcessService
from task_manager import JobStatus, task_manager


async def _run(service, article, user, platforms, brand_voice_id=None, job_id=None):
    return await service.start_processing(
        article_id=str(article["_id"]),
        content=article["content"],
        title=article["title"],
        brand_voice_id=brand_voice_id,
        platforms=platforms,
        user_id=str(user["_id"]),
        job_id=job_id,
    )


class TestPipeline:

    @pytest.mark.asyncio
    async def test_event_sequence(self, process_service, events, editor, make_article):
        user, _ = editor
        article = make_article(user)

        job_id = await _run(process_service, article, user, ["linkedin", "seo"])

        names = events.names()
        assert names[0] == "process:started"
        assert names[1] == "process:update"
        assert names[-2:] == ["process:update", "process:completed"]
        assert all(room == str(user["_id"]) for room, _, _ in events.events)

        statuses = [(d["agent"], d["status"]) for d in events.of("agent:status")]
        assert statuses == [
            ("researcher", "running"), ("researcher", "completed"),
            ("fact_checker", "running"), ("fact_checker", "completed"),
            ("reformatter", "running"), ("reformatter", "completed"),
            ("fact_checker", "running"), ("fact_checker", "completed"),
            ("seo_optimizer", "running"), ("seo_optimizer", "completed"),
        ]

        progress = [d["progress"] for d in events.of("process:update")]
        assert progress == [10, 25, 30, 40, 100]
        assert events.of("process:update")[2]["current_step"] == "Formatting for linkedin..."

        completed = events.of("process:completed")[0]
        assert completed["job_id"] == job_id
        assert [r["platform"] for r in completed["results"]] == ["linkedin", "seo"]

        job = task_manager.get_job(job_id)
        assert job["status"] == JobStatus.COMPLETED
        assert job["progress"] == 100

    @pytest.mark.asyncio
    async def test_documents_written(self, process_service, db, editor, make_article):
        user, _ = editor
        article = make_article(user)

        await _run(process_service, article, user, ["linkedin", "seo"])

        stored = db.articles.find_one({"_id": article["_id"]})
        assert stored["status"] == "completed"
        assert stored["metadata"]["topics"] == ["Technology", "Innovation"]
        assert stored["metadata"]["sentiment"] == "positive"
        detection = stored["fake_news_detection"]
        assert detection["authenticity_status"] == "authentic"
        assert detection["authenticity_score"] == 90
        assert "analyzed_at" in detection

        linkedin = db.reformatted_content.find_one({"article_id": article["_id"], "platform": "linkedin"})
        assert linkedin["content"] == article["content"]
        assert linkedin["metadata"]["word_count"] == len(article["content"].split())
        assert linkedin["fact_check"]["verification_score"] == 95
        assert linkedin["fact_check"]["verification_status"] == "verified"

        seo = db.reformatted_content.find_one({"article_id": article["_id"], "platform": "seo"})
        assert seo["seo"]["slug"] == "optimized-article-title"
        assert "seo" not in linkedin

    @pytest.mark.asyncio
    async def test_rerun_keeps_one_document_per_platform(self, process_service, db, editor, make_article):
        user, _ = editor
        article = make_article(user)

        await _run(process_service, article, user, ["linkedin"])
        await _run(process_service, article, user, ["linkedin"])

        assert db.reformatted_content.count_documents({"article_id": article["_id"], "platform": "linkedin"}) == 1

    @pytest.mark.asyncio
    async def test_failure_marks_article_failed(self, db, events, editor, make_article):
        user, _ = editor
        article = make_article(user)
        service = ProcessService(db, events=events)

        async def broken(input_data):
            raise RuntimeError("reformatter exploded")

        service.agents["reformatter"].execute = broken

        with pytest.raises(RuntimeError):
            await _run(service, article, user, ["linkedin"])

        assert db.articles.find_one({"_id": article["_id"]})["status"] == "failed"
        failed = events.of("process:failed")
        assert failed and failed[0]["error"] == "reformatter exploded"
        job = task_manager.get_job(failed[0]["job_id"])
        assert job["status"] == JobStatus.FAILED

    @pytest.mark.asyncio
    async def test_cancel_between_phases(self, db, events, editor, make_article):
        user, _ = editor
        article = make_article(user)
        service = ProcessService(db, events=events)
        job_id = service.create_job(str(article["_id"]), str(user["_id"]), ["linkedin"])

        research = service.agents["researcher"].execute

        async def research_then_cancel(input_data):
            result = await research(input_data)
            task_manager.request_cancel(job_id)
            return result

        service.agents["researcher"].execute = research_then_cancel

        await _run(service, article, user, ["linkedin"], job_id=job_id)

        assert db.articles.find_one({"_id": article["_id"]})["status"] == "pending"
        assert db.reformatted_content.count_documents({}) == 0
        assert events.of("process:cancelled") == [{"job_id": job_id, "article_id": str(article["_id"])}]
        assert task_manager.get_job(job_id)["status"] == JobStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_brand_voice_shapes_reformat_prompt(self, db, events, editor, make_article):
        user, _ = editor
        voice_id = db.brand_voices.insert_one({
            "name": "Metro",
            "created_by": user["_id"],
            "system_prompt": "You write for Metro.",
            "tone": {"formality": "casual", "sentiment": "positive", "energy": "high"},
            "style": {"sentence_length": "short", "vocabulary": "simple", "use_emojis": True, "use_hashtags": True},
            "platform_overrides": [{"platform": "twitter", "custom_prompt": "Under 200 characters."}],
        }).inserted_id
        article = make_article(user)
        service = ProcessService(db, events=events)

        seen = []
        reformatter = service.agents["reformatter"]
        original_build = reformatter.build_messages

        def capture(input_data):
            messages = original_build(input_data)
            seen.append(messages[0]["content"])
            return messages

        reformatter.build_messages = capture

        await _run(service, article, user, ["twitter"], brand_voice_id=str(voice_id))

        assert seen[0].startswith("You write for Metro.")
        assert "Under 200 characters." in seen[0]
        assert "Style Guide:" in seen[0]

    @pytest.mark.asyncio
    async def test_other_users_brand_voice_is_ignored(self, db, events, editor, make_user, make_article):
        user, _ = editor
        other, _ = make_user("editor")
        voice_id = db.brand_voices.insert_one({
            "name": "Private", "system_prompt": "Secret house rules.", "created_by": other["_id"],
        }).inserted_id
        article = make_article(user)
        service = ProcessService(db, events=events)

        seen = []
        reformatter = service.agents["reformatter"]
        original_build = reformatter.build_messages

        def capture(input_data):
            messages = original_build(input_data)
            seen.append(messages[0]["content"])
            return messages

        reformatter.build_messages = capture

        await _run(service, article, user, ["linkedin"], brand_voice_id=str(voice_id))

        assert seen
        assert "Secret house rules." not in seen[0]

    def test_create_job_prunes_stale_finished_jobs(self, process_service, editor):
        user, _ = editor
        stale_id = process_service.create_job(str(ObjectId()), str(user["_id"]), ["linkedin"])
        task_manager.update_job(stale_id, status=JobStatus.COMPLETED)
        task_manager.get_job(stale_id)["updated_at"] = (datetime.utcnow() - timedelta(hours=48)).isoformat()

        fresh_id = process_service.create_job(str(ObjectId()), str(user["_id"]), ["linkedin"])

        assert task_manager.get_job(stale_id) is None
        assert task_manager.get_job(fresh_id) is not None


class TestProcessRoutes:

    def test_start_awaits_pipeline(self, client, db, editor, make_article):
        user, headers = editor
        article = make_article(user)

        response = client.post("/api/process/start", headers=headers, json={"article_id": str(article["_id"])})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Processing started"
        assert body["data"]["platforms"] == DEFAULT_PROCESS_PLATFORMS
        assert db.articles.find_one({"_id": article["_id"]})["status"] == "completed"
        assert db.reformatted_content.count_documents({"article_id": article["_id"]}) == 5

    def test_start_rejects_unknown_platform(self, client, editor, make_article):
        user, headers = editor
        article = make_article(user)
        response = client.post("/api/process/start", headers=headers, json={
            "article_id": str(article["_id"]), "platforms": ["myspace"],
        })
        assert response.status_code == 400

    def test_start_other_users_article_is_403(self, client, editor, make_user, make_article):
        _, headers = editor
        other, _ = make_user("editor")
        article = make_article(other)
        response = client.post("/api/process/start", headers=headers, json={"article_id": str(article["_id"])})
        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to process this article"

    def test_start_missing_article_is_404(self, client, editor):
        _, headers = editor
        response = client.post("/api/process/start", headers=headers, json={"article_id": str(ObjectId())})
        assert response.status_code == 404

    def test_status_of_finished_job(self, client, editor, make_article):
        user, headers = editor
        article = make_article(user)
        job_id = client.post(
            "/api/process/start", headers=headers,
            json={"article_id": str(article["_id"]), "platforms": ["linkedin"]},
        ).json()["data"]["job_id"]

        response = client.get(f"/api/process/status/{job_id}", headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["progress"] == 100
        assert data["agents"]["seo_optimizer"] == {"status": "completed"}

    def test_status_requires_uuid(self, client, editor):
        _, headers = editor
        response = client.get("/api/process/status/12345", headers=headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid job ID"

    def test_status_unknown_job(self, client, editor):
        _, headers = editor
        response = client.get(f"/api/process/status/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 404

    def test_status_of_other_users_job(self, client, make_user):
        other, _ = make_user("editor")
        _, headers = make_user("editor")
        job_id = str(uuid.uuid4())
        task_manager.create_job(job_id, str(ObjectId()), str(other["_id"]), ["linkedin"])
        response = client.get(f"/api/process/status/{job_id}", headers=headers)
        assert response.status_code == 403

    def test_results_with_platform_filter(self, client, db, editor, make_article):
        user, headers = editor
        article = make_article(user, status="completed")
        db.reformatted_content.insert_many([
            {"article_id": article["_id"], "platform": "linkedin", "content": "a"},
            {"article_id": article["_id"], "platform": "seo", "content": "b"},
        ])

        data = client.get(
            f"/api/process/results/{article['_id']}?platform=seo", headers=headers
        ).json()["data"]
        assert data["article"] == {"id": str(article["_id"]), "title": article["title"], "status": "completed"}
        assert [r["platform"] for r in data["reformatted_content"]] == ["seo"]

    def test_reformat(self, client, editor):
        _, headers = editor
        response = client.post("/api/process/reformat", headers=headers, json={
            "content": "Short text for a tweet.", "platform": "twitter",
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["platform"] == "twitter"
        assert data["content"] == "Short text for a tweet."
        assert data["character_count"] == len("Short text for a tweet.")

    def test_reformat_invalid_platform(self, client, editor):
        _, headers = editor
        response = client.post("/api/process/reformat", headers=headers, json={
            "content": "x", "platform": "fax",
        })
        assert response.status_code == 400

    def test_fact_check(self, client, editor):
        _, headers = editor
        response = client.post("/api/process/fact-check", headers=headers, json={
            "original_content": "Revenue grew 25%.", "reformatted_content": "Revenue grew 25%!",
        })
        assert response.status_code == 200
        fact_check = response.json()["data"]["fact_check"]
        assert fact_check["verification_score"] == 95
        assert "checked_at" in fact_check

    def test_optimize_seo(self, client, editor):
        _, headers = editor
        response = client.post("/api/process/optimize-seo", headers=headers, json={
            "content": "Article body", "target_keywords": ["transit"],
        })
        assert response.status_code == 200
        assert response.json()["data"]["meta_title"] == "Optimized Article Title"

    def test_cancel_flags_job(self, client, editor):
        user, headers = editor
        job_id = str(uuid.uuid4())
        task_manager.create_job(job_id, str(ObjectId()), str(user["_id"]), ["linkedin"])

        response = client.post(f"/api/process/cancel/{job_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == f"Job {job_id} cancelled"
        assert task_manager.is_cancel_requested(job_id)
