"""AI-generated artifacts: gap analysis, interview feedback, project ideas, jobs."""

from typing import Literal

from pydantic import BaseModel


class SkillGap(BaseModel):
    id: str = ""
    name: str
    priority: Literal["High", "Medium", "Low"] = "Medium"
    current_level: str = ""
    target_level: str = ""
    description: str = ""


class ProficiencyAdjustment(BaseModel):
    skill: str = ""
    status: str = ""  # e.g. "Exceeds (+10%)"
    percentage: float = 0
    color: str = ""


class AnalysisResult(BaseModel):
    critical_gaps: list[SkillGap] = []
    proficiency_adjustments: list[ProficiencyAdjustment] = []
    emerging_skills: list[str] = []


class InterviewFeedback(BaseModel):
    score: float = 0
    feedback: str = ""
    transcript: str = ""


class ProjectBlueprint(BaseModel):
    title: str
    description: str = ""
    difficulty: Literal["Beginner", "Intermediate", "Advanced"] = "Intermediate"
    tech_stack: list[str] = []
    user_stories: list[str] = []
    features: list[str] = []
    learning_outcomes: list[str] = []


class Job(BaseModel):
    id: str = ""
    title: str
    company: str = ""
    location: str = ""
    match_score: float = 0
    salary_range: str = ""
    missing_skills: list[str] = []
    posted_date: str = ""
    type: Literal["Remote", "Hybrid", "On-site"] = "Remote"
