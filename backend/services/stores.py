"""Per-user profile and task state with optimistic writes.

A store holds the snapshot the rest of the app reads. Mutations are
applied locally first and then persisted; a failed write is logged and
the local state is kept (last write wins, no rollback). A failed read
falls back to an empty profile or task list; edits that rebuild a whole
collection from the snapshot are refused until a read has succeeded, and
re-raise the read error.
"""

import logging
from typing import Any

from models.schemas.profile import ProfileUpdate, Skill, UserProfile
from models.schemas.task import Task
from services import career_ai
from services.errors import PersistenceError
from services.gemini_client import GeminiClient
from services.persistence import PersistenceBackend
from services.profile_editing import (
    PREPEND_COLLECTIONS,
    add_skill,
    append_task,
    remove_item,
    remove_skill,
    toggle_task_status,
    upsert_item,
)

logger = logging.getLogger(__name__)

ITEM_COLLECTIONS = ("experience", "education", "certifications", "projects")


class ProfileStore:
    def __init__(
        self,
        email: str,
        backend: PersistenceBackend,
        *,
        allow_duplicate_skills: bool = False,
    ) -> None:
        self.email = email
        self.backend = backend
        self.allow_duplicate_skills = allow_duplicate_skills
        self.profile = UserProfile(email=email)
        self.last_error: str | None = None
        self.loaded = False
        self._load_error: Exception | None = None

    async def load(self) -> UserProfile:
        try:
            self.profile = await self.backend.get_user(self.email)
            self.last_error = None
            self.loaded = True
            self._load_error = None
        except Exception as e:
            logger.error("Failed to load profile for %s: %s", self.email, e)
            self.last_error = str(e)
            self.profile = UserProfile(email=self.email)
            self.loaded = False
            self._load_error = e
        return self.profile

    async def update(self, changes: ProfileUpdate | dict[str, Any]) -> UserProfile:
        """Merge present fields into the snapshot, then persist them."""
        data = changes.changes() if isinstance(changes, ProfileUpdate) else dict(changes)
        if not data:
            return self.profile

        self.profile = UserProfile.model_validate({**self.profile.model_dump(), **data})
        try:
            await self.backend.update_user(self.email, _plain(data))
            self.last_error = None
        except Exception as e:
            logger.error("Failed to save updates for %s: %s", self.email, e)
            self.last_error = str(e)
        return self.profile

    async def save_item(self, collection: str, item: Any, *, is_new: bool) -> UserProfile:
        """Insert or edit one entry of experience/education/certifications/projects."""
        self.require_loaded()
        current = self._collection(collection)
        updated = upsert_item(
            current,
            item,
            is_new=is_new,
            prepend=collection in PREPEND_COLLECTIONS,
            name=collection,
        )
        return await self.update({collection: updated})

    async def delete_item(self, collection: str, item_id: str) -> UserProfile:
        self.require_loaded()
        updated = remove_item(self._collection(collection), item_id, name=collection)
        return await self.update({collection: updated})

    async def add_skill(self, skill: Skill) -> UserProfile:
        self.require_loaded()
        updated = add_skill(self.profile.skills, skill, allow_duplicates=self.allow_duplicate_skills)
        return await self.update({"skills": updated})

    async def remove_skill(self, name: str) -> UserProfile:
        self.require_loaded()
        return await self.update({"skills": remove_skill(self.profile.skills, name)})

    async def import_resume(self, extracted: ProfileUpdate) -> UserProfile:
        """Apply a resume extraction; collections it contains replace the stored ones."""
        self.require_loaded()
        return await self.update(extracted)

    def require_loaded(self) -> None:
        if not self.loaded:
            raise self._load_error or PersistenceError(f"Profile for {self.email} has not been loaded")

    def _collection(self, collection: str) -> list:
        if collection not in ITEM_COLLECTIONS:
            raise ValueError(f"Unknown profile collection: {collection}")
        return list(getattr(self.profile, collection))


class TaskStore:
    def __init__(self, email: str, backend: PersistenceBackend) -> None:
        self.email = email
        self.backend = backend
        self.tasks: list[Task] = []
        self.error: str | None = None
        self.loaded = False
        self._load_error: Exception | None = None

    async def load(self) -> list[Task]:
        if not self.email:
            self.tasks = []
            self.loaded = True
            return self.tasks
        try:
            self.tasks = await self.backend.get_tasks(self.email)
            self.error = None
            self.loaded = True
            self._load_error = None
        except Exception as e:
            logger.error("Failed to fetch tasks for %s: %s", self.email, e)
            self.error = "Failed to load tasks"
            self.tasks = []
            self.loaded = False
            self._load_error = e
        return self.tasks

    async def toggle(self, task_id: str) -> list[Task]:
        self.require_loaded()
        return await self.replace(toggle_task_status(self.tasks, task_id))

    async def add(self, task: Task) -> list[Task]:
        self.require_loaded()
        return await self.replace(append_task(self.tasks, task))

    def require_loaded(self) -> None:
        if not self.loaded:
            raise self._load_error or PersistenceError(f"Tasks for {self.email} have not been loaded")

    async def replace(self, tasks: list[Task]) -> list[Task]:
        """Swap in a whole new list and persist it."""
        self.tasks = list(tasks)
        try:
            await self.backend.save_tasks(self.email, self.tasks)
        except Exception as e:
            logger.error("Failed to save tasks for %s: %s", self.email, e)
        return self.tasks

    async def regenerate(
        self,
        client: GeminiClient,
        current_role: str,
        target_role: str,
        focus_area: str,
    ) -> list[Task]:
        """Replace the list with a freshly generated week. Generation errors propagate."""
        try:
            generated = await career_ai.generate_weekly_tasks(client, current_role, target_role, focus_area)
        except Exception:
            self.error = "Failed to generate tasks"
            raise
        self.error = None
        return await self.replace(generated)


def _plain(data: dict[str, Any]) -> dict[str, Any]:
    """Pydantic values in an update dict -> plain JSON-able data for the backend."""
    def convert(value: Any) -> Any:
        if hasattr(value, "model_dump"):
            return value.model_dump()
        if isinstance(value, list):
            return [convert(v) for v in value]
        return value

    return {k: convert(v) for k, v in data.items()}
