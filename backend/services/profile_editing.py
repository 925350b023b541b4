"""Whole-collection edits for profile sub-collections and task lists.

Every function returns a new list and leaves its input untouched; callers
submit the returned collection as a full replacement.
"""

import time
from datetime import datetime
from typing import Any, Iterable, Sequence, TypeVar

from pydantic import BaseModel

from models.schemas.profile import Skill
from models.schemas.task import Task
from services.errors import DuplicateSkillError, ItemNotFoundError

ItemT = TypeVar("ItemT", bound=BaseModel)

# New entries go to the top for these collections, to the bottom for the rest
PREPEND_COLLECTIONS = frozenset({"experience", "projects"})

_IMPORT_PREFIXES = {
    "experience": "exp",
    "education": "edu",
    "certifications": "cert",
    "projects": "proj",
}


def new_item_id(existing_ids: Iterable[str] = (), *, prefix: str = "", now: float | None = None) -> str:
    """Millisecond-timestamp id, bumped until it is unique among ``existing_ids``."""
    taken = set(existing_ids)
    stamp = int((time.time() if now is None else now) * 1000)
    candidate = f"{prefix}{stamp}"
    while candidate in taken:
        stamp += 1
        candidate = f"{prefix}{stamp}"
    return candidate


def upsert_item(
    collection: Sequence[ItemT],
    item: ItemT,
    *,
    is_new: bool,
    prepend: bool = False,
    name: str = "collection",
) -> list[ItemT]:
    """Insert a new item or replace the one sharing its id.

    New items keep a caller-supplied id only if no sibling already uses it;
    otherwise they get a fresh one. Edits preserve the id and position.
    """
    items = list(collection)
    ids = [getattr(existing, "id", "") for existing in items]

    if is_new:
        item_id = item.id if item.id and item.id not in ids else new_item_id(ids)
        created = item.model_copy(update={"id": item_id})
        return [created, *items] if prepend else [*items, created]

    if not item.id or item.id not in ids:
        raise ItemNotFoundError(name, item.id)
    return [item if existing.id == item.id else existing for existing in items]


def remove_item(collection: Sequence[ItemT], item_id: str, *, name: str = "collection") -> list[ItemT]:
    remaining = [existing for existing in collection if existing.id != item_id]
    if len(remaining) == len(collection):
        raise ItemNotFoundError(name, item_id)
    return remaining


def add_skill(skills: Sequence[Skill], skill: Skill, *, allow_duplicates: bool = False) -> list[Skill]:
    """Append a skill; by default a name already present (any case) is rejected."""
    if not allow_duplicates:
        wanted = skill.name.strip().lower()
        if any(existing.name.strip().lower() == wanted for existing in skills):
            raise DuplicateSkillError(skill.name)
    return [*skills, skill]


def remove_skill(skills: Sequence[Skill], name: str) -> list[Skill]:
    """Drop every skill with exactly this name."""
    return [s for s in skills if s.name != name]


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def toggle_task_status(tasks: Sequence[Task], task_id: str) -> list[Task]:
    """Flip one task between Todo and Done; anything not Done becomes Done."""
    if not any(t.id == task_id for t in tasks):
        raise ItemNotFoundError("tasks", task_id)
    return [
        t.model_copy(update={"status": "Todo" if t.status == "Done" else "Done"}) if t.id == task_id else t
        for t in tasks
    ]


def append_task(tasks: Sequence[Task], task: Task) -> list[Task]:
    ids = [t.id for t in tasks]
    task_id = task.id if task.id and task.id not in ids else new_item_id(ids, prefix="task_")
    return [*tasks, task.model_copy(update={"id": task_id, "status": "Todo"})]


def prepare_generated_tasks(tasks: Sequence[Task]) -> list[Task]:
    """Generated tasks always start as Todo with ids unique within the batch."""
    prepared: list[Task] = []
    seen: set[str] = set()
    for task in tasks:
        task_id = task.id if task.id and task.id not in seen else new_item_id(seen, prefix="task_")
        seen.add(task_id)
        prepared.append(task.model_copy(update={"id": task_id, "status": "Todo"}))
    return prepared


# ---------------------------------------------------------------------------
# Resume import
# ---------------------------------------------------------------------------

def assign_import_ids(partial: dict, *, now: datetime | None = None) -> dict:
    """Post-process a profile extracted from a resume.

    Skills are marked as verified resume skills (bare names are accepted);
    every other collection entry gets a ``<prefix>_<timestamp>_<index>`` id.
    Entries that are not objects are passed through untouched for the
    caller to reject.
    """
    now = now or datetime.now()
    stamp = int(now.timestamp() * 1000)
    result = dict(partial)

    if isinstance(result.get("skills"), list):
        result["skills"] = [_resume_skill(s) for s in result["skills"]]

    for name, prefix in _IMPORT_PREFIXES.items():
        entries = result.get(name)
        if not entries or not isinstance(entries, list):
            continue
        processed = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                processed.append(entry)
                continue
            entry = {**entry, "id": f"{prefix}_{stamp}_{i}"}
            if name == "experience":
                entry["skills_used"] = entry.get("skills_used") or []
            elif name == "projects":
                entry["type"] = "Professional"
                entry["tech_stack"] = entry.get("tech_stack") or []
            processed.append(entry)
        result[name] = processed

    result["resume_last_updated"] = now.strftime("%b %d, %Y")
    return result


def _resume_skill(skill: Any) -> Any:
    if isinstance(skill, str):
        skill = {"name": skill}
    if not isinstance(skill, dict):
        return skill
    return {**skill, "verified": True, "source": "Resume", "confidence": 90}
