"""Career coaching operations on top of the Gemini boundary.

Each operation builds a prompt, asks for JSON, and validates the payload
into the domain models. A payload of the wrong shape is reported as a
failed generation; nothing is retried.
"""

import logging
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from config import settings
from models.schemas.analysis import AnalysisResult, InterviewFeedback, Job, ProjectBlueprint
from models.schemas.profile import ProfileUpdate
from models.schemas.roadmap import RoadmapPhase
from models.schemas.task import Task
from services import prompt_builder, resume_reader
from services.errors import GenerationError
from services.gemini_client import Attachment, GeminiClient
from services.profile_editing import assign_import_ids, prepare_generated_tasks

logger = logging.getLogger(__name__)

_roadmap_adapter = TypeAdapter(list[RoadmapPhase])
_tasks_adapter = TypeAdapter(list[Task])
_jobs_adapter = TypeAdapter(list[Job])

# Fields a resume import may set on the profile
_RESUME_FIELDS = (
    "name",
    "role",
    "bio",
    "location",
    "linkedin_url",
    "skills",
    "experience",
    "education",
    "certifications",
    "projects",
)


def _validate(operation: str, validator: type[BaseModel] | TypeAdapter, data: Any) -> Any:
    try:
        if isinstance(validator, TypeAdapter):
            return validator.validate_python(data)
        return validator.model_validate(data)
    except ValidationError as e:
        logger.error("Malformed %s response: %s", operation, e)
        raise GenerationError(f"Failed to generate {operation}: malformed response") from e


async def generate_gap_analysis(client: GeminiClient, current_role: str, target_role: str) -> AnalysisResult:
    prompt = prompt_builder.build_gap_analysis_prompt(current_role, target_role)
    data = await client.generate_json(prompt)
    return _validate("gap analysis", AnalysisResult, data)


async def generate_roadmap(client: GeminiClient, current_role: str, target_role: str) -> list[RoadmapPhase]:
    prompt = prompt_builder.build_roadmap_prompt(current_role, target_role)
    data = await client.generate_json(prompt)
    return _validate("roadmap", _roadmap_adapter, data)


async def generate_weekly_tasks(
    client: GeminiClient, current_role: str, target_role: str, focus_area: str
) -> list[Task]:
    """Five fresh tasks for the focus area, all starting as Todo."""
    prompt = prompt_builder.build_weekly_tasks_prompt(
        current_role or "Professional", target_role or "Senior Level", focus_area
    )
    data = await client.generate_json(prompt)
    return prepare_generated_tasks(_validate("tasks", _tasks_adapter, data))


async def analyze_resume(
    client: GeminiClient,
    content: bytes,
    mime_type: str,
    file_name: str = "",
) -> ProfileUpdate:
    """Extract a partial profile from a resume upload.

    PDFs go to the reasoning model inline; DOCX text is extracted locally.
    Collections in the result carry fresh import ids.
    """
    if mime_type == resume_reader.PDF_MIME:
        pages = resume_reader.count_pdf_pages(content)
        logger.info("Analyzing %d-page PDF resume", pages)
        data = await client.generate_json(
            prompt_builder.build_resume_extraction_prompt(),
            attachment=Attachment(content, mime_type),
            model=settings.gemini_reasoning_model,
        )
    else:
        text = resume_reader.extract_text_docx(content)
        data = await client.generate_json(
            prompt_builder.build_resume_extraction_prompt(text),
            model=settings.gemini_reasoning_model,
        )

    if not isinstance(data, dict):
        raise GenerationError("Failed to analyze resume: malformed response")

    extracted = {k: data[k] for k in _RESUME_FIELDS if data.get(k) is not None}
    processed = assign_import_ids(extracted)
    if file_name:
        processed["resume_file_name"] = file_name
    return _validate("resume profile", ProfileUpdate, processed)


async def generate_project_idea(
    client: GeminiClient, target_role: str, skills: list[str], level: str
) -> ProjectBlueprint:
    prompt = prompt_builder.build_project_idea_prompt(target_role, skills, level)
    data = await client.generate_json(prompt)
    return _validate("project idea", ProjectBlueprint, data)


async def scan_job_market(client: GeminiClient, role: str, location: str) -> list[Job]:
    prompt = prompt_builder.build_job_scan_prompt(role, location or "Remote")
    data = await client.generate_json(prompt)
    return _validate("job scan", _jobs_adapter, data)


async def generate_interview_question(client: GeminiClient, role: str, topic: str) -> str:
    question = await client.generate_text(prompt_builder.build_interview_question_prompt(role, topic))
    return question or "Could not generate question."


async def evaluate_audio_answer(
    client: GeminiClient, question: str, audio: bytes, mime_type: str
) -> InterviewFeedback:
    data = await client.generate_json(
        prompt_builder.build_answer_evaluation_prompt(question),
        attachment=Attachment(audio, mime_type),
        model=settings.gemini_audio_model,
    )
    return _validate("answer evaluation", InterviewFeedback, data)


async def check_health(client: GeminiClient) -> bool:
    """True when the configured credential can reach the model."""
    healthy = await client.ping()
    if not healthy:
        logger.warning("Gemini health check failed")
    return healthy
