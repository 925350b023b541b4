"""Dashboard metrics: profile strength, task completion, learning hours,
readiness and a synthetic readiness trend.

Everything here is a pure function of the profile and task snapshot passed
in. The only randomness is the jitter on interior trend points, drawn from
an injectable source so tests can pin it.
"""

import logging
import math
import random
from datetime import datetime
from typing import Protocol, Sequence

from models.schemas.metrics import DerivedMetrics, TrendPoint
from models.schemas.profile import UserProfile
from models.schemas.task import Task
from services.duration_parser import parse_duration

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = ("name", "role", "location", "bio", "target_role")
AVATAR_MIN_LENGTH = 50

# Readiness weights
W_STRENGTH = 0.3
W_COMPLETION = 0.5
BASE_KNOWLEDGE = 20

# Trend series
TREND_BASELINE = 10
TREND_MIN_POINTS = 3
TREND_MAX_POINTS = 12
TREND_JITTER = 5
DEFAULT_TENURE_MONTHS = 6

_JOIN_DATE_FORMATS = (
    "%B %Y",      # March 2023
    "%b %Y",      # Mar 2023
    "%d %B %Y",
    "%B %d, %Y",  # March 5, 2023
    "%b %d, %Y",
    "%m/%d/%Y",
    "%Y-%m",
)


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


def _round(value: float) -> int:
    """Round half up, the way scores are displayed."""
    return math.floor(value + 0.5)


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def calculate_profile_strength(profile: UserProfile) -> int:
    """Completeness score 0-100 from fixed-weight contributions."""
    score = 0
    for field in IDENTITY_FIELDS:
        value = getattr(profile, field, "") or ""
        if isinstance(value, str) and len(value) > 2:
            score += 10

    if len(profile.avatar_url or "") > AVATAR_MIN_LENGTH:
        score += 10

    skill_count = len(profile.skills or [])
    if skill_count >= 3:
        score += 15
    elif skill_count > 0:
        score += 5

    if profile.experience:
        score += 15
    if profile.education:
        score += 5
    if profile.projects:
        score += 5

    return _clamp(score)


def calculate_completion(tasks: Sequence[Task]) -> tuple[int, int, int]:
    """Return (completion_rate, completed_count, total_count).

    An empty list divides by 1, so the rate is 0 while the reported total
    stays 0.
    """
    completed = sum(1 for t in tasks if t.status == "Done")
    total = len(tasks)
    rate = _round(100 * completed / max(total, 1))
    return rate, completed, total


def calculate_learning_hours(tasks: Sequence[Task]) -> float:
    """Sum of parsed durations over completed tasks."""
    return sum(parse_duration(t.duration) for t in tasks if t.status == "Done")


def estimate_hours_this_week(total_hours: float) -> int:
    """Approximate weekly hours as 20% of the total, at least 1 when any
    hours exist.

    Tasks carry no completion timestamp, so this is a display placeholder
    and not a measurement.
    """
    if total_hours <= 0:
        return 0
    return _round(max(1.0, total_hours * 0.2))


def calculate_readiness(strength: int, completion_rate: int, has_experience: bool) -> int:
    base = BASE_KNOWLEDGE if has_experience else 0
    return _clamp(_round(strength * W_STRENGTH + completion_rate * W_COMPLETION + base))


def parse_join_date(joined_date: str | None, now: datetime) -> datetime:
    """Parse a join date; fall back to six months before ``now``."""
    text = (joined_date or "").strip()
    if text:
        try:
            parsed = datetime.fromisoformat(text)
            return parsed.replace(tzinfo=None)
        except ValueError:
            pass
        for fmt in _JOIN_DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        logger.debug("Unrecognised join date %r, assuming %d months", text, DEFAULT_TENURE_MONTHS)
    return _add_months(now, -DEFAULT_TENURE_MONTHS)


def _add_months(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1)


def _months_between(start: datetime, end: datetime) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def generate_trend_series(
    joined_date: str | None,
    current_score: float,
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
) -> list[TrendPoint]:
    """Monthly readiness points from the join month up to the current month.

    Between 3 and 12 points. Scores rise linearly from TREND_BASELINE to
    ``current_score``; interior points get +/-TREND_JITTER of noise, the
    first and last points are exact.
    """
    now = now or datetime.now()
    rng = rng or random.Random()

    joined = parse_join_date(joined_date, now)
    elapsed = _months_between(joined, now)
    points = max(TREND_MIN_POINTS, min(TREND_MAX_POINTS, elapsed + 1))

    first_month = _add_months(now, -(points - 1))
    series = []
    for i in range(points):
        progress = i / (points - 1)
        score = TREND_BASELINE + (current_score - TREND_BASELINE) * progress
        if 0 < i < points - 1:
            score += rng.uniform(-TREND_JITTER, TREND_JITTER)
        series.append(
            TrendPoint(
                label=_add_months(first_month, i).strftime("%b"),
                score=max(0, _round(score)),
            )
        )
    return series


def compute_metrics(
    profile: UserProfile,
    tasks: Sequence[Task],
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
) -> DerivedMetrics:
    """Full dashboard snapshot for one profile and its tasks."""
    strength = calculate_profile_strength(profile)
    rate, completed, total = calculate_completion(tasks)
    hours = calculate_learning_hours(tasks)
    readiness = calculate_readiness(strength, rate, bool(profile.experience))

    return DerivedMetrics(
        profile_strength=strength,
        completion_rate=rate,
        completed_tasks=completed,
        total_tasks=total,
        learning_hours=_round(hours),
        readiness_score=readiness,
        hours_this_week=estimate_hours_this_week(hours),
        trend_series=generate_trend_series(profile.joined_date, readiness, now=now, rng=rng),
    )


def qualitative_label(score: int) -> str:
    if score > 80:
        return "Excellent"
    if score > 60:
        return "Strong"
    if score > 40:
        return "Good"
    return "Developing"
