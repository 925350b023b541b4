import pytest

from db import repository
from db.session import session_scope
from models.schemas import Skill, Task
from services.errors import UserNotFoundError
from services.persistence import SqlPersistence
from services.stores import ProfileStore, TaskStore

EMAIL = "ada@example.com"


@pytest.fixture
def user(db):
    with session_scope() as session:
        return repository.register(session, "Ada", EMAIL, "pw")


@pytest.mark.asyncio
async def test_profile_store_round_trip(user):
    store = ProfileStore(EMAIL, SqlPersistence())
    await store.load()
    await store.add_skill(Skill(name="Python"))

    reloaded = await SqlPersistence().get_user(EMAIL)
    assert [s.name for s in reloaded.skills] == ["Python"]


@pytest.mark.asyncio
async def test_task_store_round_trip(user):
    store = TaskStore(EMAIL, SqlPersistence())
    await store.load()
    await store.add(Task(title="Read a chapter"))

    tasks = await SqlPersistence().get_tasks(EMAIL)
    assert [t.title for t in tasks] == ["Read a chapter"]
    assert tasks[0].status == "Todo"


@pytest.mark.asyncio
async def test_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        await SqlPersistence().get_user("ghost@example.com")
