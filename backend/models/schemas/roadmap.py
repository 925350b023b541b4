"""Roadmap phases as returned by the AI boundary, and the actions derived from them."""

from typing import Literal

from pydantic import BaseModel

PhaseStatus = Literal["Completed", "In Progress", "Locked"]


class RoadmapResource(BaseModel):
    title: str = ""
    url: str = ""
    type: str = "Article"  # Video | Article | Course | Documentation


class RoadmapItem(BaseModel):
    title: str = ""
    status: str = "Locked"
    subtitle: str | None = None
    progress: float | None = None  # 0-100
    resources: list[RoadmapResource] = []


class RoadmapPhase(BaseModel):
    id: str = ""
    title: str = ""
    status: PhaseStatus = "Locked"
    duration: str = ""
    items: list[RoadmapItem] = []


class RecommendedAction(BaseModel):
    id: int
    title: str
    duration: str = ""
    tag: str = ""
    type: Literal["course", "project", "mentor"] = "course"
