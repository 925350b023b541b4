"""Flatten a phase/item roadmap into at most three recommended next actions.

Input comes straight from the AI boundary, so every shape is treated as
untrusted: phases may be models or dicts, ``items`` may be missing or not a
list, subtitles may be absent. Nothing here raises.
"""

import logging
from typing import Any, Iterable

from models.schemas.roadmap import RecommendedAction, RoadmapPhase

logger = logging.getLogger(__name__)

MAX_ACTIONS = 3
HIGH_IMPACT_TAG = "High Impact"

_PROJECT_KEYWORDS = ("project", "build")
_MENTOR_KEYWORDS = ("mentor", "review", "interview")

FALLBACK_ACTION = RecommendedAction(
    id=0,
    title="Start Foundation Phase",
    duration="4 Weeks",
    tag=HIGH_IMPACT_TAG,
    type="course",
)


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _items(phase: Any) -> list:
    items = _get(phase, "items")
    return list(items) if isinstance(items, (list, tuple)) else []


def classify_action(title: str) -> str:
    """Map an item title to the kind of action it asks for."""
    lowered = title.lower()
    if any(k in lowered for k in _PROJECT_KEYWORDS):
        return "project"
    if any(k in lowered for k in _MENTOR_KEYWORDS):
        return "mentor"
    return "course"


def recommend_actions(phases: Iterable[RoadmapPhase | dict] | None) -> list[RecommendedAction]:
    """Pick up to three pending roadmap items, in phase then item order."""
    phase_list = [p for p in (phases or []) if isinstance(p, (dict, RoadmapPhase))]

    # (item, phase title, phase duration)
    candidates: list[tuple[Any, str, str]] = []
    for phase in phase_list:
        for item in _items(phase):
            if _get(item, "status") != "Completed":
                candidates.append((item, _text(_get(phase, "title")), _text(_get(phase, "duration"))))

    # Everything completed (or no items at all): surface the first phase again
    if not candidates and phase_list:
        first = phase_list[0]
        candidates = [
            (item, _text(_get(first, "title")), _text(_get(first, "duration")))
            for item in _items(first)
        ]

    actions = []
    for idx, (item, _phase_title, phase_duration) in enumerate(candidates[:MAX_ACTIONS]):
        title = _text(_get(item, "title"))
        actions.append(
            RecommendedAction(
                id=idx,
                title=title,
                duration=_text(_get(item, "subtitle")) or phase_duration,
                tag=HIGH_IMPACT_TAG if idx == 0 else "",
                type=classify_action(title),
            )
        )

    if not actions:
        logger.debug("Roadmap produced no actions, using foundation fallback")
        actions.append(FALLBACK_ACTION.model_copy())
    return actions
