"""PersistenceBackend implementation over the SQL repository.

Each call runs in its own transaction on the threadpool, so the blocking
SQLAlchemy work stays off the event loop.
"""

from typing import Any, Protocol

from fastapi.concurrency import run_in_threadpool

from db import repository
from db.session import session_scope
from models.schemas.profile import UserProfile
from models.schemas.task import Task


class PersistenceBackend(Protocol):
    async def get_user(self, email: str) -> UserProfile: ...

    async def update_user(self, email: str, changes: dict[str, Any]) -> None: ...

    async def get_tasks(self, email: str) -> list[Task]: ...

    async def save_tasks(self, email: str, tasks: list[Task]) -> list[Task]: ...


def _in_session(func, *args):
    with session_scope() as session:
        return func(session, *args)


class SqlPersistence:
    async def get_user(self, email: str) -> UserProfile:
        return await run_in_threadpool(_in_session, repository.get_user, email)

    async def update_user(self, email: str, changes: dict[str, Any]) -> None:
        await run_in_threadpool(_in_session, repository.update_user, email, changes)

    async def get_tasks(self, email: str) -> list[Task]:
        return await run_in_threadpool(_in_session, repository.get_tasks, email)

    async def save_tasks(self, email: str, tasks: list[Task]) -> list[Task]:
        return await run_in_threadpool(_in_session, repository.save_tasks, email, tasks)
