"""Domain contracts shared by services, repository and API."""

from models.schemas.analysis import (
    AnalysisResult,
    InterviewFeedback,
    Job,
    ProficiencyAdjustment,
    ProjectBlueprint,
    SkillGap,
)
from models.schemas.metrics import DerivedMetrics, TrendPoint
from models.schemas.profile import (
    Certification,
    Education,
    Insight,
    ProfileUpdate,
    Project,
    Skill,
    UserPreferences,
    UserProfile,
    WorkExperience,
)
from models.schemas.roadmap import (
    RecommendedAction,
    RoadmapItem,
    RoadmapPhase,
    RoadmapResource,
)
from models.schemas.task import Task

__all__ = [
    "AnalysisResult",
    "Certification",
    "DerivedMetrics",
    "Education",
    "Insight",
    "InterviewFeedback",
    "Job",
    "ProficiencyAdjustment",
    "ProfileUpdate",
    "Project",
    "ProjectBlueprint",
    "RecommendedAction",
    "RoadmapItem",
    "RoadmapPhase",
    "RoadmapResource",
    "Skill",
    "SkillGap",
    "Task",
    "TrendPoint",
    "UserPreferences",
    "UserProfile",
    "WorkExperience",
]
