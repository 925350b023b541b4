"""Profile and task persistence over SQLAlchemy sessions.

Callers own the transaction (see ``db.session.session_scope``): a profile
update that touches several collections commits or rolls back as a whole.
Collections are never patched row by row; each present collection is
deleted and reinserted in order.
"""

import logging
from datetime import datetime
from typing import Any

from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from db.models import (
    CertificationModel,
    EducationModel,
    ExperienceModel,
    ProjectModel,
    SkillModel,
    TaskModel,
    UserModel,
)
from models.schemas.profile import (
    Certification,
    Education,
    Insight,
    Project,
    Skill,
    UserPreferences,
    UserProfile,
    WorkExperience,
)
from models.schemas.task import Task
from services.errors import InvalidCredentialsError, UserExistsError, UserNotFoundError
from services.profile_editing import new_item_id

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Scalar columns on users that a partial update may set
USER_FIELDS = (
    "name",
    "role",
    "bio",
    "location",
    "avatar_url",
    "phone",
    "linkedin_url",
    "open_to_opportunities",
    "target_role",
    "target_industry",
    "target_companies",
    "timeline_goal",
    "readiness_score",
    "profile_strength",
    "level",
    "insights",
    "preferences",
    "resume_last_updated",
    "resume_file_name",
)


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if not normalized:
        raise ValueError("Email cannot be empty.")
    return normalized


def _find_user(session: Session, email: str) -> UserModel | None:
    stmt = select(UserModel).where(UserModel.email == normalize_email(email))
    return session.execute(stmt).scalar_one_or_none()


def _require_user(session: Session, email: str) -> UserModel:
    user = _find_user(session, email)
    if user is None:
        raise UserNotFoundError(email)
    return user


# ---------------------------------------------------------------------------
# Row <-> domain mapping
# ---------------------------------------------------------------------------

def _to_profile(user: UserModel) -> UserProfile:
    return UserProfile(
        id=str(user.id),
        name=user.name,
        role=user.role,
        avatar_url=user.avatar_url,
        bio=user.bio,
        location=user.location,
        email=user.email,
        phone=user.phone,
        linkedin_url=user.linkedin_url,
        joined_date=user.joined_date,
        open_to_opportunities=user.open_to_opportunities,
        target_role=user.target_role,
        target_industry=user.target_industry,
        target_companies=list(user.target_companies or []),
        timeline_goal=user.timeline_goal,
        readiness_score=user.readiness_score,
        profile_strength=user.profile_strength,
        level=user.level,
        insights=[Insight(**i) for i in user.insights or []],
        skills=[
            Skill(
                name=s.name,
                category=s.category,
                level=s.level,
                verified=s.verified,
                source=s.source,
                confidence=s.confidence,
            )
            for s in user.skills
        ],
        experience=[
            WorkExperience(
                id=e.item_id,
                company=e.company,
                role=e.role,
                start_date=e.start_date,
                end_date=e.end_date,
                description=e.description,
                skills_used=list(e.skills_used or []),
                impact_metrics=list(e.impact_metrics or []),
                location=e.location,
                type=e.type,
            )
            for e in user.experience
        ],
        education=[
            Education(id=e.item_id, institution=e.institution, degree=e.degree, year=e.year)
            for e in user.education
        ],
        certifications=[
            Certification(
                id=c.item_id,
                name=c.name,
                issuer=c.issuer,
                date=c.date,
                expiry=c.expiry,
                credential_url=c.credential_url,
            )
            for c in user.certifications
        ],
        projects=[
            Project(
                id=p.item_id,
                name=p.name,
                type=p.type,
                description=p.description,
                tech_stack=list(p.tech_stack or []),
                link=p.link,
                image=p.image,
                ai_quality_score=p.ai_quality_score,
            )
            for p in user.projects
        ],
        preferences=UserPreferences(**(user.preferences or {})),
        resume_last_updated=user.resume_last_updated,
        resume_file_name=user.resume_file_name,
    )


def _to_task(row: TaskModel) -> Task:
    return Task(
        id=row.item_id,
        title=row.title,
        type=row.type,
        duration=row.duration,
        status=row.status,
        difficulty=row.difficulty,
        description=row.description,
    )


def _skill_row(user_id: int, position: int, data: dict) -> SkillModel:
    return SkillModel(
        user_id=user_id,
        position=position,
        name=data["name"],
        category=data.get("category", "Technical"),
        level=data.get("level", "Intermediate"),
        verified=bool(data.get("verified", False)),
        source=data.get("source") or "Manual",
        confidence=data.get("confidence"),
    )


def _experience_row(user_id: int, position: int, data: dict) -> ExperienceModel:
    return ExperienceModel(
        user_id=user_id,
        position=position,
        item_id=data.get("id") or "",
        company=data.get("company", ""),
        role=data.get("role", ""),
        start_date=data.get("start_date", ""),
        end_date=data.get("end_date", ""),
        description=data.get("description", ""),
        type=data.get("type"),
        location=data.get("location", ""),
        skills_used=list(data.get("skills_used") or []),
        impact_metrics=list(data.get("impact_metrics") or []),
    )


def _education_row(user_id: int, position: int, data: dict) -> EducationModel:
    return EducationModel(
        user_id=user_id,
        position=position,
        item_id=data.get("id") or "",
        institution=data.get("institution", ""),
        degree=data.get("degree", ""),
        year=data.get("year", ""),
    )


def _certification_row(user_id: int, position: int, data: dict) -> CertificationModel:
    return CertificationModel(
        user_id=user_id,
        position=position,
        item_id=data.get("id") or "",
        name=data.get("name", ""),
        issuer=data.get("issuer", ""),
        date=data.get("date", ""),
        expiry=data.get("expiry", ""),
        credential_url=data.get("credential_url", ""),
    )


def _project_row(user_id: int, position: int, data: dict) -> ProjectModel:
    return ProjectModel(
        user_id=user_id,
        position=position,
        item_id=data.get("id") or "",
        name=data.get("name", ""),
        type=data.get("type", "Personal"),
        description=data.get("description", ""),
        tech_stack=list(data.get("tech_stack") or []),
        link=data.get("link", ""),
        image=data.get("image", ""),
        ai_quality_score=data.get("ai_quality_score"),
    )


COLLECTIONS = {
    "skills": (SkillModel, _skill_row),
    "experience": (ExperienceModel, _experience_row),
    "education": (EducationModel, _education_row),
    "certifications": (CertificationModel, _certification_row),
    "projects": (ProjectModel, _project_row),
}


def _with_unique_ids(entries: list[dict]) -> list[dict]:
    seen: set[str] = set()
    result = []
    for data in entries:
        item_id = data.get("id")
        if not item_id or item_id in seen:
            item_id = new_item_id(seen)
            data = {**data, "id": item_id}
        seen.add(item_id)
        result.append(data)
    return result


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def register(session: Session, name: str, email: str, password: str) -> UserProfile:
    normalized = normalize_email(email)
    if _find_user(session, normalized) is not None:
        raise UserExistsError(normalized)

    user = UserModel(
        name=name.strip(),
        email=normalized,
        password_hash=pwd_context.hash(password),
        joined_date=datetime.now().strftime("%B %Y"),
        preferences=UserPreferences().model_dump(),
    )
    session.add(user)
    session.flush()
    logger.info("Registered user %s", normalized)
    return _to_profile(user)


def login(session: Session, email: str, password: str) -> UserProfile:
    user = _find_user(session, email)
    if user is None or not pwd_context.verify(password, user.password_hash):
        raise InvalidCredentialsError()
    return _to_profile(user)


def get_user(session: Session, email: str) -> UserProfile:
    return _to_profile(_require_user(session, email))


def update_user(session: Session, email: str, changes: dict[str, Any]) -> None:
    """Apply a partial profile.

    Present scalar fields overwrite; absent ones are untouched. Each present
    collection is replaced: all rows deleted, then the new list inserted in
    order. Item entries without an id, or repeating one already used in the
    same collection, are given a fresh unique id.
    """
    user = _require_user(session, email)

    for field in USER_FIELDS:
        if field in changes:
            setattr(user, field, changes[field])

    for name, (model, build_row) in COLLECTIONS.items():
        if name not in changes or changes[name] is None:
            continue
        session.execute(delete(model).where(model.user_id == user.id))
        entries = changes[name] if name == "skills" else _with_unique_ids(changes[name])
        for position, data in enumerate(entries):
            session.add(build_row(user.id, position, data))

    session.flush()
    session.expire(user)
    logger.debug("Updated profile %s: %s", user.email, sorted(changes))


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def get_tasks(session: Session, email: str) -> list[Task]:
    """Tasks in stored order. An unknown user simply has none."""
    user = _find_user(session, email)
    if user is None:
        return []
    stmt = select(TaskModel).where(TaskModel.user_id == user.id).order_by(TaskModel.position)
    return [_to_task(row) for row in session.execute(stmt).scalars()]


def save_tasks(session: Session, email: str, tasks: list[Task]) -> list[Task]:
    """Replace the whole task list."""
    user = _require_user(session, email)
    session.execute(delete(TaskModel).where(TaskModel.user_id == user.id))

    saved = []
    seen: set[str] = set()
    for position, task in enumerate(tasks):
        task_id = task.id if task.id and task.id not in seen else new_item_id(seen, prefix="task_")
        seen.add(task_id)
        session.add(
            TaskModel(
                user_id=user.id,
                position=position,
                item_id=task_id,
                title=task.title,
                type=task.type,
                duration=task.duration,
                status=task.status,
                difficulty=task.difficulty,
                description=task.description,
            )
        )
        saved.append(task.model_copy(update={"id": task_id}))
    session.flush()
    return saved


def create_task(session: Session, email: str, task: Task) -> Task:
    """Append one task. New tasks always start as Todo."""
    user = _require_user(session, email)
    existing = session.execute(
        select(TaskModel.item_id, TaskModel.position).where(TaskModel.user_id == user.id)
    ).all()
    ids = {row.item_id for row in existing}
    next_position = max((row.position for row in existing), default=-1) + 1

    task_id = task.id if task.id and task.id not in ids else new_item_id(ids, prefix="task_")
    created = task.model_copy(update={"id": task_id, "status": "Todo"})
    session.add(
        TaskModel(
            user_id=user.id,
            position=next_position,
            item_id=created.id,
            title=created.title,
            type=created.type,
            duration=created.duration,
            status=created.status,
            difficulty=created.difficulty,
            description=created.description,
        )
    )
    session.flush()
    return created
