"""ORM tables. Every profile sub-collection hangs off ``users`` with a
cascading foreign key, keeps the client-assigned ``item_id`` and stores its
order in ``position``."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    role: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    avatar_url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    phone: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    linkedin_url: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    joined_date: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    open_to_opportunities: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    target_role: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    target_industry: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    target_companies: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    timeline_goal: Mapped[str | None] = mapped_column(String(32), nullable=True)
    readiness_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    profile_strength: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    level: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    insights: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    preferences: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    resume_last_updated: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    resume_file_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    skills: Mapped[list["SkillModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="SkillModel.position"
    )
    experience: Mapped[list["ExperienceModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="ExperienceModel.position"
    )
    education: Mapped[list["EducationModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="EducationModel.position"
    )
    certifications: Mapped[list["CertificationModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="CertificationModel.position"
    )
    projects: Mapped[list["ProjectModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="ProjectModel.position"
    )
    tasks: Mapped[list["TaskModel"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="TaskModel.position"
    )


class SkillModel(Base):
    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    source: Mapped[str] = mapped_column(String(32), default="Manual", nullable=False)
    confidence: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user: Mapped[UserModel] = relationship(back_populates="skills")


class ExperienceModel(Base):
    __tablename__ = "experience"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    role: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    start_date: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    end_date: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    skills_used: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    impact_metrics: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    user: Mapped[UserModel] = relationship(back_populates="experience")


class EducationModel(Base):
    __tablename__ = "education"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    institution: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    degree: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    year: Mapped[str] = mapped_column(String(50), default="", nullable=False)

    user: Mapped[UserModel] = relationship(back_populates="education")


class CertificationModel(Base):
    __tablename__ = "certifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    issuer: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    date: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    expiry: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    credential_url: Mapped[str] = mapped_column(String(512), default="", nullable=False)

    user: Mapped[UserModel] = relationship(back_populates="certifications")


class ProjectModel(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="Personal", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    tech_stack: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    link: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    image: Mapped[str] = mapped_column(Text, default="", nullable=False)
    ai_quality_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user: Mapped[UserModel] = relationship(back_populates="projects")


class TaskModel(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    duration: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="Todo", nullable=False)
    difficulty: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    user: Mapped[UserModel] = relationship(back_populates="tasks")


class CachedArtifactModel(Base):
    """Last AI artifact generated for (email, role, target_role), kept as raw JSON."""
    __tablename__ = "cached_artifacts"
    __table_args__ = (
        UniqueConstraint("kind", "email", "role", "target_role", name="uq_cached_artifact_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    target_role: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
