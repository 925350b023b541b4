import io
import json

import pytest
from docx import Document
from fastapi.testclient import TestClient

from api.dependencies import get_artifact_cache, get_gemini_client
from main import app
from services.artifact_cache import ANALYSIS, cache_key
from services.errors import GenerationError, MissingCredentialError

pytestmark = pytest.mark.api

EMAIL = "ada@example.com"


@pytest.fixture
def client(db, fake_gemini, dict_cache):
    app.dependency_overrides[get_gemini_client] = lambda: fake_gemini
    app.dependency_overrides[get_artifact_cache] = lambda: dict_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(client):
    response = client.post("/api/auth/register", json={"name": "Ada", "email": EMAIL, "password": "pw"})
    assert response.status_code == 200
    client.put(f"/api/user/{EMAIL}", json={"role": "Engineer", "target_role": "Staff Engineer"})
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["gemini_configured"] is True


class TestAuth:
    def test_register_and_login(self, user, client):
        assert user["email"] == EMAIL
        response = client.post("/api/auth/login", json={"email": EMAIL, "password": "pw"})
        assert response.status_code == 200
        assert response.json()["role"] == "Engineer"

    def test_register_twice(self, user, client):
        response = client.post("/api/auth/register", json={"name": "Ada", "email": EMAIL, "password": "pw"})
        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    def test_bad_password(self, user, client):
        response = client.post("/api/auth/login", json={"email": EMAIL, "password": "wrong"})
        assert response.status_code == 401


class TestUser:
    def test_unknown_user(self, client):
        assert client.get("/api/user/ghost@example.com").status_code == 404

    def test_edits_for_unknown_user_are_not_found(self, client):
        ghost = "ghost@example.com"
        assert client.post(f"/api/user/{ghost}/skills", json={"skill": {"name": "Rust"}}).status_code == 404
        assert client.delete(f"/api/user/{ghost}/skills/Rust").status_code == 404
        response = client.put(f"/api/user/{ghost}/experience", json={"item": {"company": "A"}, "is_new": True})
        assert response.status_code == 404
        assert client.delete(f"/api/user/{ghost}/projects/p1").status_code == 404

    def test_partial_update(self, user, client):
        response = client.put(f"/api/user/{EMAIL}", json={"bio": "Hello", "skills": [{"name": "Go"}]})
        assert response.status_code == 200
        assert response.json() == {"message": "Profile updated"}

        profile = client.get(f"/api/user/{EMAIL}").json()
        assert profile["bio"] == "Hello"
        assert profile["role"] == "Engineer"
        assert [s["name"] for s in profile["skills"]] == ["Go"]

    def test_add_and_remove_skill(self, user, client):
        response = client.post(f"/api/user/{EMAIL}/skills", json={"skill": {"name": "Rust"}})
        assert response.status_code == 200
        assert response.json()["skills"][0]["source"] == "Manual"

        duplicate = client.post(f"/api/user/{EMAIL}/skills", json={"skill": {"name": "rust"}})
        assert duplicate.status_code == 409

        response = client.delete(f"/api/user/{EMAIL}/skills/Rust")
        assert response.json()["skills"] == []
        assert client.get(f"/api/user/{EMAIL}").json()["skills"] == []

    def test_collection_items(self, user, client):
        first = client.put(
            f"/api/user/{EMAIL}/experience",
            json={"item": {"company": "A", "role": "Dev"}, "is_new": True},
        ).json()
        second = client.put(
            f"/api/user/{EMAIL}/experience",
            json={"item": {"company": "B", "role": "Lead"}, "is_new": True},
        ).json()
        assert [e["company"] for e in second["experience"]] == ["B", "A"]

        item_id = first["experience"][0]["id"]
        edited = client.put(
            f"/api/user/{EMAIL}/experience",
            json={"item": {"id": item_id, "company": "A2", "role": "Dev"}},
        ).json()
        assert [e["company"] for e in edited["experience"]] == ["B", "A2"]

        response = client.delete(f"/api/user/{EMAIL}/experience/{item_id}")
        assert [e["company"] for e in response.json()["experience"]] == ["B"]

        stored = client.get(f"/api/user/{EMAIL}").json()
        assert [e["company"] for e in stored["experience"]] == ["B"]

    def test_edit_unknown_item(self, user, client):
        response = client.put(f"/api/user/{EMAIL}/education", json={"item": {"id": "nope"}})
        assert response.status_code == 404

    def test_unknown_collection(self, user, client):
        response = client.put(f"/api/user/{EMAIL}/hobbies", json={"item": {}, "is_new": True})
        assert response.status_code == 404

    def test_invalid_item(self, user, client):
        response = client.put(
            f"/api/user/{EMAIL}/projects",
            json={"item": {"name": "X", "type": "Secret"}, "is_new": True},
        )
        assert response.status_code == 422


class TestResumeImport:
    def _docx(self) -> bytes:
        doc = Document()
        doc.add_paragraph("Ada Lovelace - Engineer")
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def test_import_docx(self, user, client, fake_gemini):
        fake_gemini.queue({
            "name": "Ada Lovelace",
            "skills": [{"name": "Python"}],
            "education": [{"institution": "Home"}],
        })
        response = client.post(
            f"/api/user/{EMAIL}/resume",
            files={"resume_file": ("ada.docx", self._docx(), "application/octet-stream")},
        )
        assert response.status_code == 200
        profile = response.json()
        assert profile["name"] == "Ada Lovelace"
        assert profile["skills"][0]["verified"] is True
        assert profile["education"][0]["id"].startswith("edu_")
        assert profile["resume_file_name"] == "ada.docx"
        assert client.get(f"/api/user/{EMAIL}").json()["name"] == "Ada Lovelace"

    def test_import_for_unknown_user_skips_analysis(self, client, fake_gemini):
        response = client.post(
            "/api/user/ghost@example.com/resume",
            files={"resume_file": ("ada.docx", self._docx(), "application/octet-stream")},
        )
        assert response.status_code == 404
        assert fake_gemini.calls == []

    def test_rejects_other_formats(self, user, client, fake_gemini):
        response = client.post(
            f"/api/user/{EMAIL}/resume",
            files={"resume_file": ("resume.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 400
        assert fake_gemini.calls == []


class TestTasks:
    def test_unknown_user_has_no_tasks(self, client):
        response = client.get("/api/tasks/ghost@example.com")
        assert response.status_code == 200
        assert response.json() == []

    def test_replace_create_toggle(self, user, client):
        client.put(f"/api/tasks/{EMAIL}", json=[{"id": "1", "title": "Read", "duration": "2 hours"}])
        created = client.post("/api/tasks", json={"email": EMAIL, "task": {"title": "Build", "status": "Done"}})
        assert created.status_code == 200
        assert created.json()["status"] == "Todo"

        toggled = client.post(f"/api/tasks/{EMAIL}/1/toggle").json()
        assert [t["status"] for t in toggled] == ["Done", "Todo"]
        assert [t["status"] for t in client.get(f"/api/tasks/{EMAIL}").json()] == ["Done", "Todo"]

    def test_toggle_unknown_task(self, user, client):
        assert client.post(f"/api/tasks/{EMAIL}/missing/toggle").status_code == 404

    def test_focus_from_cached_analysis(self, user, client, dict_cache):
        dict_cache.put(
            ANALYSIS,
            cache_key(EMAIL, "Engineer", "Staff Engineer"),
            json.dumps({"critical_gaps": [{"name": "Kafka"}]}),
        )
        response = client.get(f"/api/tasks/{EMAIL}/focus")
        assert response.json() == {"focus_area": "Closing Skill Gap: Kafka"}

    def test_generate_uses_resolved_focus(self, user, client, fake_gemini):
        fake_gemini.queue([{"title": f"Task {i}"} for i in range(5)])
        response = client.post(f"/api/tasks/{EMAIL}/generate")
        assert response.status_code == 200
        assert len(response.json()) == 5
        assert "Core Competencies & Growth" in fake_gemini.calls[0]["prompt"]
        assert len(client.get(f"/api/tasks/{EMAIL}").json()) == 5

    def test_generate_with_explicit_focus(self, user, client, fake_gemini):
        fake_gemini.queue([{"title": "Partition a topic"}])
        client.post(f"/api/tasks/{EMAIL}/generate", json={"focus_area": "Kafka internals"})
        assert "Kafka internals" in fake_gemini.calls[0]["prompt"]


class TestViews:
    def test_dashboard(self, user, client):
        client.put(f"/api/tasks/{EMAIL}", json=[{"id": "1", "title": "Read", "status": "Done", "duration": "2 hours"}])
        data = client.get(f"/api/dashboard/{EMAIL}").json()
        metrics = data["metrics"]
        assert metrics["completion_rate"] == 100
        assert metrics["learning_hours"] == 2
        assert 3 <= len(metrics["trend_series"]) <= 12
        assert "Complete Profile" in [i["title"] for i in data["insights"]]
        assert data["label"] in {"Excellent", "Strong", "Good", "Developing"}

    def test_analysis_caches_and_recommends(self, user, client, fake_gemini, dict_cache):
        fake_gemini.queue(
            {"critical_gaps": [{"name": "Kafka"}]},
            [{"title": "Depth", "status": "In Progress", "duration": "6 Weeks",
              "items": [{"title": "Build a stream processor", "status": "Locked"}]}],
        )
        response = client.post(f"/api/analysis/{EMAIL}")
        assert response.status_code == 200
        data = response.json()
        assert data["analysis"]["critical_gaps"][0]["name"] == "Kafka"
        assert data["recommended_actions"][0]["type"] == "project"
        assert data["recommended_actions"][0]["tag"] == "High Impact"

        focus = client.get(f"/api/tasks/{EMAIL}/focus").json()
        assert focus["focus_area"] == "Depth"

    def test_roadmap_fallback_action(self, user, client, fake_gemini):
        fake_gemini.queue([])
        data = client.post(f"/api/roadmap/{EMAIL}").json()
        assert data["recommended_actions"][0]["title"] == "Start Foundation Phase"


class TestAIErrors:
    def test_generation_failure_is_retryable(self, user, client, fake_gemini):
        fake_gemini.queue(GenerationError("Gemini API error: quota"))
        response = client.post("/api/jobs/scan", json={"role": "SRE"})
        assert response.status_code == 502
        body = response.json()
        assert body["retryable"] is True
        assert body["action"] == "reconfigure_credential"

    def test_missing_credential(self, client, fake_gemini):
        fake_gemini.queue(MissingCredentialError())
        response = client.post("/api/interview/question", json={"role": "SRE", "topic": "Linux"})
        assert response.status_code == 503


def test_interview_tools(client, fake_gemini):
    fake_gemini.queue("What happens when a pod is OOMKilled?")
    question = client.post("/api/interview/question", json={"role": "SRE", "topic": "Kubernetes"})
    assert question.json()["question"].startswith("What happens")

    fake_gemini.queue({"score": 70, "feedback": "Good.", "transcript": "..."})
    response = client.post(
        "/api/interview/evaluate",
        data={"question": "Why?"},
        files={"audio": ("answer.webm", b"\x1a\x45\xdf\xa3", "audio/webm")},
    )
    assert response.status_code == 200
    assert response.json()["score"] == 70


def test_project_idea(client, fake_gemini):
    fake_gemini.queue({"title": "Feature store", "tech_stack": ["Python"]})
    response = client.post("/api/projects/idea", json={"target_role": "ML Engineer", "skills": ["Python"]})
    assert response.json()["title"] == "Feature store"


def test_settings_api_key(client, fake_gemini):
    response = client.put("/api/settings/api-key", json={"api_key": "fresh"})
    assert response.json() == {"message": "API key updated"}
    response = client.put("/api/settings/api-key", json={"api_key": ""})
    assert response.json() == {"message": "API key cleared"}
    assert client.get("/health").json()["gemini_configured"] is False
    assert client.get("/api/settings/ai-health").json() == {"healthy": False}
