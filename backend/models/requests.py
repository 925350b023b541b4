from typing import Any

from pydantic import BaseModel, Field

from models.schemas.profile import Skill
from models.schemas.task import Task


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)


class SkillAddRequest(BaseModel):
    skill: Skill


class CollectionItemRequest(BaseModel):
    """One experience, education, certification or project entry."""
    item: dict[str, Any]
    is_new: bool = False


class TaskCreateRequest(BaseModel):
    email: str
    task: Task


class GenerateTasksRequest(BaseModel):
    focus_area: str | None = Field(None, max_length=500)


class InterviewQuestionRequest(BaseModel):
    role: str = Field(..., max_length=200)
    topic: str = Field(..., max_length=200)


class ProjectIdeaRequest(BaseModel):
    target_role: str = Field(..., max_length=200)
    skills: list[str] = []
    level: str = "Intermediate"


class JobScanRequest(BaseModel):
    role: str = Field(..., max_length=200)
    location: str = "Remote"


class ApiKeyRequest(BaseModel):
    api_key: str = Field(..., max_length=500, description="Gemini API key; empty clears it")
