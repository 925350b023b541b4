"""User profile and its owned collections."""

from typing import Literal

from pydantic import BaseModel

SkillCategory = Literal["Technical", "Tools", "Soft", "Domain", "System Design"]
SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]


class Skill(BaseModel):
    """A skill, addressed by name within the profile's skill set."""
    name: str
    category: SkillCategory = "Technical"
    level: SkillLevel = "Intermediate"
    verified: bool = False
    source: Literal["Resume", "Project", "Manual", "Task"] = "Manual"
    confidence: int | None = None  # 0-100


class WorkExperience(BaseModel):
    id: str = ""
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""  # "Present" for the current role
    description: str = ""
    skills_used: list[str] = []
    impact_metrics: list[str] = []
    location: str = ""
    type: Literal["Full-time", "Contract", "Internship"] | None = None


class Education(BaseModel):
    id: str = ""
    institution: str = ""
    degree: str = ""
    year: str = ""


class Certification(BaseModel):
    id: str = ""
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiry: str = ""
    credential_url: str = ""


class Project(BaseModel):
    id: str = ""
    name: str = ""
    type: Literal["Personal", "Academic", "Professional", "CareerPilot AI"] = "Personal"
    description: str = ""
    tech_stack: list[str] = []
    link: str = ""
    image: str = ""
    ai_quality_score: int | None = None


class UserPreferences(BaseModel):
    weekly_hours: int = 0
    learning_style: Literal["Visual", "Reading", "Hands-on"] = "Visual"
    remote_preference: Literal["Remote", "Hybrid", "On-site"] = "Remote"
    target_locations: list[str] = []
    salary_range: str = ""
    availability: Literal["Immediate", "1-3 Months", "3-6 Months"] = "Immediate"
    company_size: Literal["Startup", "Scale-up", "Enterprise"] = "Startup"


class Insight(BaseModel):
    type: Literal["Success", "Warning", "Info"] = "Info"
    title: str = ""
    message: str = ""


class UserProfile(BaseModel):
    """Canonical user profile.

    profile_strength and readiness_score are derived values cached for
    display; services.metrics recomputes them from the rest of the profile.
    """
    id: str | None = None
    # Identity
    name: str = ""
    role: str = ""  # current title
    avatar_url: str = ""
    bio: str = ""
    location: str = ""
    email: str = ""
    phone: str = ""
    linkedin_url: str = ""
    joined_date: str = ""
    open_to_opportunities: bool = False

    # Career goal
    target_role: str = ""
    target_industry: str = ""
    target_companies: list[str] = []
    timeline_goal: Literal["3 Months", "6 Months", "1 Year"] | None = None

    # Derived
    readiness_score: int = 0
    profile_strength: int = 0
    level: str = ""
    insights: list[Insight] = []

    skills: list[Skill] = []
    experience: list[WorkExperience] = []
    education: list[Education] = []
    certifications: list[Certification] = []
    projects: list[Project] = []
    preferences: UserPreferences = UserPreferences()

    resume_last_updated: str = ""
    resume_file_name: str = ""


class ProfileUpdate(BaseModel):
    """Partial profile. Only fields explicitly present are applied; present
    collections replace the stored collection wholesale."""
    name: str | None = None
    role: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    phone: str | None = None
    linkedin_url: str | None = None
    open_to_opportunities: bool | None = None
    target_role: str | None = None
    target_industry: str | None = None
    target_companies: list[str] | None = None
    timeline_goal: Literal["3 Months", "6 Months", "1 Year"] | None = None
    readiness_score: int | None = None
    profile_strength: int | None = None
    level: str | None = None
    insights: list[Insight] | None = None
    skills: list[Skill] | None = None
    experience: list[WorkExperience] | None = None
    education: list[Education] | None = None
    certifications: list[Certification] | None = None
    projects: list[Project] | None = None
    preferences: UserPreferences | None = None
    resume_last_updated: str | None = None
    resume_file_name: str | None = None

    def changes(self) -> dict:
        """Fields the caller actually sent, as plain data.

        An explicit null only clears timeline_goal; elsewhere it is ignored.
        """
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "timeline_goal"}
