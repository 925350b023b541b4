"""Shared dependencies for API routes."""

from config import settings
from services.artifact_cache import ArtifactCache, SqlArtifactCache
from services.gemini_client import GeminiClient, get_client
from services.persistence import PersistenceBackend, SqlPersistence
from services.stores import ProfileStore, TaskStore

_cache = SqlArtifactCache()
_persistence = SqlPersistence()


def get_gemini_client() -> GeminiClient:
    return get_client()


def get_artifact_cache() -> ArtifactCache:
    return _cache


def get_persistence() -> PersistenceBackend:
    return _persistence


def profile_store(email: str, backend: PersistenceBackend) -> ProfileStore:
    return ProfileStore(email, backend, allow_duplicate_skills=settings.allow_duplicate_skills)


def task_store(email: str, backend: PersistenceBackend) -> TaskStore:
    return TaskStore(email, backend)
