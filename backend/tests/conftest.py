"""Shared test configuration, fixtures and pytest markers."""

import os

# Must be set before config.settings is first imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""

from typing import Any

import pytest

from db import dispose_engine, init_db
from services.errors import MissingCredentialError
from services.gemini_client import Attachment, GeminiClient


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: exercises the HTTP surface through TestClient")


class FakeGemini(GeminiClient):
    """GeminiClient that replays queued responses instead of calling the API.

    Queue entries are returned in order; an exception instance is raised.
    """

    def __init__(self, *responses: Any) -> None:
        super().__init__("test-key")
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def _next(self, prompt: str, attachment: Attachment | None, model: str | None) -> Any:
        self.calls.append({"prompt": prompt, "attachment": attachment, "model": model})
        if not self.configured:
            raise MissingCredentialError()
        if not self.responses:
            raise AssertionError(f"Unexpected Gemini call: {prompt[:80]}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def generate_json(self, prompt, *, attachment=None, model=None):
        return self._next(prompt, attachment, model)

    async def generate_text(self, prompt, *, model=None):
        return self._next(prompt, None, model)


class DictCache:
    """In-memory ArtifactCache."""

    def __init__(self) -> None:
        self.entries: dict[tuple, str] = {}

    def get(self, kind, key):
        return self.entries.get((kind, *key))

    def put(self, kind, key, payload):
        self.entries[(kind, *key)] = payload


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def dict_cache():
    return DictCache()


@pytest.fixture
def db():
    """Fresh in-memory database for each test."""
    dispose_engine()
    init_db()
    yield
    dispose_engine()
