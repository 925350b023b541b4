"""Choose the focus area that steers the next batch of generated tasks.

Priority: active roadmap phase, then the top critical skill gap, then a
generic fallback. Cached artifacts are hints only; anything unreadable is
a cache miss.
"""

import json
import logging
from typing import Any

from services.artifact_cache import ANALYSIS, ROADMAP, ArtifactCache, cache_key

logger = logging.getLogger(__name__)

FALLBACK_FOCUS = "Core Competencies & Growth"
SKILL_GAP_PREFIX = "Closing Skill Gap: "


def _read(cache: ArtifactCache, kind: str, email: str, role: str, target_role: str) -> Any:
    try:
        raw = cache.get(kind, cache_key(email, role, target_role))
        return json.loads(raw) if raw else None
    except Exception as e:  # noqa: BLE001
        logger.debug("Ignoring cached %s for %s: %s", kind, email, e)
        return None


def _active_phase_title(roadmap: Any) -> str | None:
    if not isinstance(roadmap, list):
        return None
    for phase in roadmap:
        if isinstance(phase, dict) and phase.get("status") == "In Progress":
            title = phase.get("title")
            if isinstance(title, str) and title:
                return title
    return None


def _first_gap_name(analysis: Any) -> str | None:
    if not isinstance(analysis, dict):
        return None
    gaps = analysis.get("critical_gaps")
    if not isinstance(gaps, list) or not gaps or not isinstance(gaps[0], dict):
        return None
    name = gaps[0].get("name")
    return name if isinstance(name, str) and name else None


def resolve_focus_area(cache: ArtifactCache, email: str, role: str, target_role: str) -> str:
    title = _active_phase_title(_read(cache, ROADMAP, email, role, target_role))
    if title:
        return title

    gap = _first_gap_name(_read(cache, ANALYSIS, email, role, target_role))
    if gap:
        return f"{SKILL_GAP_PREFIX}{gap}"

    return FALLBACK_FOCUS
