"""Dashboard view: derived metrics plus the short coaching insights."""

from datetime import datetime
from typing import Sequence

from models.schemas.metrics import DerivedMetrics
from models.schemas.profile import Insight, UserProfile
from models.schemas.task import Task
from services.metrics import RandomSource, compute_metrics, qualitative_label

LOW_STRENGTH = 50
LOW_COMPLETION = 30


def build_insights(metrics: DerivedMetrics) -> list[Insight]:
    insights: list[Insight] = []
    if metrics.profile_strength < LOW_STRENGTH:
        insights.append(
            Insight(
                type="Warning",
                title="Complete Profile",
                message="Add skills, experience and a bio to unlock better recommendations.",
            )
        )
    if metrics.completion_rate < LOW_COMPLETION:
        insights.append(
            Insight(
                type="Info",
                title="Accelerate Learning",
                message="Finish a few tasks from this week's plan to build momentum.",
            )
        )
    return insights


def build_dashboard(
    profile: UserProfile,
    tasks: Sequence[Task],
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
) -> tuple[DerivedMetrics, list[Insight], str]:
    metrics = compute_metrics(profile, tasks, now=now, rng=rng)
    return metrics, build_insights(metrics), qualitative_label(metrics.readiness_score)
