"""Dashboard metrics derived from a profile + task snapshot."""

from pydantic import BaseModel


class TrendPoint(BaseModel):
    label: str  # short month name, e.g. "Mar"
    score: int


class DerivedMetrics(BaseModel):
    """Recomputed on every change; never authoritative.

    hours_this_week is an approximation (20% of learning hours) because
    task completion carries no timestamp.
    """
    profile_strength: int = 0
    completion_rate: int = 0
    completed_tasks: int = 0
    total_tasks: int = 0
    learning_hours: int = 0
    readiness_score: int = 0
    hours_this_week: int = 0
    trend_series: list[TrendPoint] = []
