from pydantic import BaseModel

from models.schemas.analysis import AnalysisResult
from models.schemas.metrics import DerivedMetrics
from models.schemas.profile import Insight
from models.schemas.roadmap import RecommendedAction, RoadmapPhase


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    gemini_configured: bool = False


class AIHealthResponse(BaseModel):
    healthy: bool


class FocusResponse(BaseModel):
    focus_area: str


class DashboardResponse(BaseModel):
    metrics: DerivedMetrics
    insights: list[Insight] = []
    label: str = ""


class RoadmapResponse(BaseModel):
    roadmap: list[RoadmapPhase] = []
    recommended_actions: list[RecommendedAction] = []


class AnalysisResponse(RoadmapResponse):
    analysis: AnalysisResult


class QuestionResponse(BaseModel):
    question: str
