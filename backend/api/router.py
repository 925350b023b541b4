import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import (
    get_artifact_cache,
    get_gemini_client,
    get_persistence,
    profile_store,
    task_store,
)
from config import settings
from db import repository
from db.session import session_scope
from models.requests import (
    ApiKeyRequest,
    CollectionItemRequest,
    GenerateTasksRequest,
    InterviewQuestionRequest,
    JobScanRequest,
    LoginRequest,
    ProjectIdeaRequest,
    RegisterRequest,
    SkillAddRequest,
    TaskCreateRequest,
)
from models.responses import (
    AIHealthResponse,
    AnalysisResponse,
    DashboardResponse,
    FocusResponse,
    HealthResponse,
    MessageResponse,
    QuestionResponse,
    RoadmapResponse,
)
from models.schemas import (
    Certification,
    Education,
    InterviewFeedback,
    Job,
    ProfileUpdate,
    Project,
    ProjectBlueprint,
    Task,
    UserProfile,
    WorkExperience,
)
from services import career_ai, resume_reader
from services.artifact_cache import ANALYSIS, ROADMAP, ArtifactCache, cache_key, dump_payload
from services.dashboard import build_dashboard
from services.errors import InvalidUploadError
from services.focus_resolver import resolve_focus_area
from services.gemini_client import GeminiClient
from services.persistence import PersistenceBackend
from services.roadmap_reconciler import recommend_actions

logger = logging.getLogger(__name__)

router = APIRouter()
api = APIRouter(prefix="/api")
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

_ITEM_MODELS: dict[str, type[BaseModel]] = {
    "experience": WorkExperience,
    "education": Education,
    "certifications": Certification,
    "projects": Project,
}


async def _read_upload(upload: UploadFile) -> bytes:
    content = await upload.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise InvalidUploadError(f"File too large. Max size: {settings.max_upload_size_mb}MB")
    if not content:
        raise InvalidUploadError("Uploaded file is empty")
    return content


def _load_profile(email: str) -> UserProfile:
    with session_scope() as session:
        return repository.get_user(session, email)


def _item_model(collection: str) -> type[BaseModel]:
    model = _ITEM_MODELS.get(collection)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Unknown collection: {collection}")
    return model


@router.get("/health", response_model=HealthResponse)
async def health(client: GeminiClient = Depends(get_gemini_client)):
    return HealthResponse(status="ok", gemini_configured=client.configured)


# --- Auth / persistence boundary ---

@api.post("/auth/register", response_model=UserProfile)
def register(body: RegisterRequest):
    with session_scope() as session:
        return repository.register(session, body.name, body.email, body.password)


@api.post("/auth/login", response_model=UserProfile)
def login(body: LoginRequest):
    with session_scope() as session:
        return repository.login(session, body.email, body.password)


@api.get("/user/{email}", response_model=UserProfile)
def get_user(email: str):
    return _load_profile(email)


@api.put("/user/{email}", response_model=MessageResponse)
def update_user(email: str, body: ProfileUpdate):
    with session_scope() as session:
        repository.update_user(session, email, body.changes())
    return MessageResponse(message="Profile updated")


@api.get("/tasks/{email}", response_model=list[Task])
def get_tasks(email: str):
    with session_scope() as session:
        return repository.get_tasks(session, email)


@api.put("/tasks/{email}", response_model=list[Task])
def save_tasks(email: str, tasks: list[Task]):
    with session_scope() as session:
        return repository.save_tasks(session, email, tasks)


@api.post("/tasks", response_model=Task)
def create_task(body: TaskCreateRequest):
    with session_scope() as session:
        return repository.create_task(session, body.email, body.task)


# --- Profile editing ---

@api.post("/user/{email}/skills", response_model=UserProfile)
async def add_skill(
    email: str,
    body: SkillAddRequest,
    backend: PersistenceBackend = Depends(get_persistence),
):
    store = profile_store(email, backend)
    await store.load()
    return await store.add_skill(body.skill)


@api.delete("/user/{email}/skills/{name}", response_model=UserProfile)
async def remove_skill(
    email: str,
    name: str,
    backend: PersistenceBackend = Depends(get_persistence),
):
    store = profile_store(email, backend)
    await store.load()
    return await store.remove_skill(name)


@api.put("/user/{email}/{collection}", response_model=UserProfile)
async def save_item(
    email: str,
    collection: str,
    body: CollectionItemRequest,
    backend: PersistenceBackend = Depends(get_persistence),
):
    model = _item_model(collection)
    try:
        item = model.model_validate(body.item)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e

    store = profile_store(email, backend)
    await store.load()
    return await store.save_item(collection, item, is_new=body.is_new)


@api.delete("/user/{email}/{collection}/{item_id}", response_model=UserProfile)
async def delete_item(
    email: str,
    collection: str,
    item_id: str,
    backend: PersistenceBackend = Depends(get_persistence),
):
    _item_model(collection)
    store = profile_store(email, backend)
    await store.load()
    return await store.delete_item(collection, item_id)


@api.post("/user/{email}/resume", response_model=UserProfile)
@limiter.limit(settings.ai_rate_limit)
async def import_resume(
    request: Request,
    email: str,
    resume_file: UploadFile = File(...),
    client: GeminiClient = Depends(get_gemini_client),
    backend: PersistenceBackend = Depends(get_persistence),
):
    mime_type = resume_reader.detect_mime_type(resume_file.filename, resume_file.content_type)
    content = await _read_upload(resume_file)

    store = profile_store(email, backend)
    await store.load()
    store.require_loaded()

    extracted = await career_ai.analyze_resume(client, content, mime_type, resume_file.filename or "")
    return await store.import_resume(extracted)


# --- Tasks ---

@api.post("/tasks/{email}/{task_id}/toggle", response_model=list[Task])
async def toggle_task(
    email: str,
    task_id: str,
    backend: PersistenceBackend = Depends(get_persistence),
):
    store = task_store(email, backend)
    await store.load()
    return await store.toggle(task_id)


@api.get("/tasks/{email}/focus", response_model=FocusResponse)
def get_focus(email: str, cache: ArtifactCache = Depends(get_artifact_cache)):
    profile = _load_profile(email)
    return FocusResponse(focus_area=resolve_focus_area(cache, email, profile.role, profile.target_role))


@api.post("/tasks/{email}/generate", response_model=list[Task])
@limiter.limit(settings.ai_rate_limit)
async def generate_tasks(
    request: Request,
    email: str,
    body: GenerateTasksRequest | None = None,
    client: GeminiClient = Depends(get_gemini_client),
    cache: ArtifactCache = Depends(get_artifact_cache),
    backend: PersistenceBackend = Depends(get_persistence),
):
    profile = await run_in_threadpool(_load_profile, email)
    focus_area = (body.focus_area if body else None) or await run_in_threadpool(
        resolve_focus_area, cache, email, profile.role, profile.target_role
    )
    logger.info("Generating tasks for %s, focus: %s", email, focus_area)
    store = task_store(email, backend)
    return await store.regenerate(client, profile.role, profile.target_role, focus_area)


# --- Views ---

@api.get("/dashboard/{email}", response_model=DashboardResponse)
def dashboard(email: str):
    with session_scope() as session:
        profile = repository.get_user(session, email)
        tasks = repository.get_tasks(session, email)
    metrics, insights, label = build_dashboard(profile, tasks)
    return DashboardResponse(metrics=metrics, insights=insights, label=label)


@api.post("/analysis/{email}", response_model=AnalysisResponse)
@limiter.limit(settings.ai_rate_limit)
async def analysis(
    request: Request,
    email: str,
    client: GeminiClient = Depends(get_gemini_client),
    cache: ArtifactCache = Depends(get_artifact_cache),
):
    profile = await run_in_threadpool(_load_profile, email)
    key = cache_key(email, profile.role, profile.target_role)

    result = await career_ai.generate_gap_analysis(client, profile.role, profile.target_role)
    await run_in_threadpool(cache.put, ANALYSIS, key, dump_payload(result))
    roadmap = await career_ai.generate_roadmap(client, profile.role, profile.target_role)
    await run_in_threadpool(cache.put, ROADMAP, key, dump_payload(roadmap))

    return AnalysisResponse(
        analysis=result,
        roadmap=roadmap,
        recommended_actions=recommend_actions(roadmap),
    )


@api.post("/roadmap/{email}", response_model=RoadmapResponse)
@limiter.limit(settings.ai_rate_limit)
async def roadmap(
    request: Request,
    email: str,
    client: GeminiClient = Depends(get_gemini_client),
    cache: ArtifactCache = Depends(get_artifact_cache),
):
    profile = await run_in_threadpool(_load_profile, email)
    phases = await career_ai.generate_roadmap(client, profile.role, profile.target_role)
    key = cache_key(email, profile.role, profile.target_role)
    await run_in_threadpool(cache.put, ROADMAP, key, dump_payload(phases))
    return RoadmapResponse(roadmap=phases, recommended_actions=recommend_actions(phases))


# --- AI tools ---

@api.post("/interview/question", response_model=QuestionResponse)
@limiter.limit(settings.ai_rate_limit)
async def interview_question(
    request: Request,
    body: InterviewQuestionRequest,
    client: GeminiClient = Depends(get_gemini_client),
):
    question = await career_ai.generate_interview_question(client, body.role, body.topic)
    return QuestionResponse(question=question)


@api.post("/interview/evaluate", response_model=InterviewFeedback)
@limiter.limit(settings.ai_rate_limit)
async def interview_evaluate(
    request: Request,
    question: str = Form(..., max_length=2000),
    audio: UploadFile = File(...),
    client: GeminiClient = Depends(get_gemini_client),
):
    content = await _read_upload(audio)
    mime_type = audio.content_type or "audio/webm"
    return await career_ai.evaluate_audio_answer(client, question, content, mime_type)


@api.post("/projects/idea", response_model=ProjectBlueprint)
@limiter.limit(settings.ai_rate_limit)
async def project_idea(
    request: Request,
    body: ProjectIdeaRequest,
    client: GeminiClient = Depends(get_gemini_client),
):
    return await career_ai.generate_project_idea(client, body.target_role, body.skills, body.level)


@api.post("/jobs/scan", response_model=list[Job])
@limiter.limit(settings.ai_rate_limit)
async def job_scan(
    request: Request,
    body: JobScanRequest,
    client: GeminiClient = Depends(get_gemini_client),
):
    return await career_ai.scan_job_market(client, body.role, body.location)


# --- Settings ---

@api.put("/settings/api-key", response_model=MessageResponse)
async def set_api_key(body: ApiKeyRequest, client: GeminiClient = Depends(get_gemini_client)):
    client.reconfigure(body.api_key)
    return MessageResponse(message="API key updated" if client.configured else "API key cleared")


@api.get("/settings/ai-health", response_model=AIHealthResponse)
async def ai_health(client: GeminiClient = Depends(get_gemini_client)):
    return AIHealthResponse(healthy=await career_ai.check_health(client))


router.include_router(api)
