import logging

from fastapi import APIRouter, BackgroundTasks, File, Form, HTTPException, Request, Response, UploadFile, status

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.review_cooldown import (
    REVIEW_COOKIE_NAME,
    cooldown_message,
    mark_review_completed,
    remaining_cooldown_minutes,
)
from app.integrations import discord, google_drive, google_sheets
from app.parsing.parse import DocumentExtractionError, extract_document_text
from app.schemas.resume import (
    DriveLinkRequest,
    ExtractTextResponse,
    LinkedInUrlRequest,
    ResumeCheck,
    ResumeReviewRequest,
    ResumeReviewResponse,
    ReviewScoreRequest,
    SaveToDriveResponse,
    SuccessResponse,
    ValidationOptions,
    ValidationStatusRequest,
)
from app.services.file_security import validate_resume_upload, validate_upload_signature
from app.services.resume_validation import check_resume_pdf
from app.services.review_llm import ReviewLLMError, generate_resume_review

router = APIRouter()
logger = logging.getLogger(__name__)

# Hard cap while streaming the upload; the policy limit is reported separately.
MAX_READ_BYTES = 10 * 1024 * 1024  # 10 MB


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_READ_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {MAX_READ_BYTES // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _require_pdf_signature(filename: str, content: bytes) -> None:
    try:
        validate_upload_signature(filename=filename, content=content)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/resume/extract", response_model=ExtractTextResponse)
@rate_limit(settings.upload_rate_limit)
async def extract_resume_text(request: Request, file: UploadFile = File(...)):
    filename = file.filename or "resume.pdf"
    content = await _read_upload(file)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes} bytes.",
        )
    _require_pdf_signature(filename, content)

    try:
        document = extract_document_text(content)
    except DocumentExtractionError as exc:
        logger.exception("resume_extract_failed file=%s bytes=%s", filename, len(content))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to parse PDF",
        ) from exc
    return ExtractTextResponse(text=document.text, num_pages=document.num_pages)


@router.post("/resume/validate", response_model=ResumeCheck)
@rate_limit(settings.upload_rate_limit)
async def validate_resume_file(
    request: Request,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    email: str | None = Form(default=None),
    require_summary: bool = Form(default=True),
    require_highlights: bool = Form(default=True),
    require_experience: bool = Form(default=True),
    require_education: bool = Form(default=True),
    require_contact: bool = Form(default=True),
    require_achievements: bool = Form(default=False),
    require_one_page: bool = Form(default=True),
):
    filename = file.filename or ""
    content = await _read_upload(file)

    upload_errors = validate_resume_upload(
        filename=filename,
        content_type=file.content_type,
        size=len(content),
        max_bytes=settings.max_upload_bytes,
        enforce_filename_format=settings.enforce_filename_format,
    )
    if upload_errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=upload_errors)
    _require_pdf_signature(filename, content)

    if email:
        background_tasks.add_task(discord.send_notification, "RESUME_REVIEW_STARTED", email)

    options = ValidationOptions(
        require_summary=require_summary,
        require_highlights=require_highlights,
        require_experience=require_experience,
        require_education=require_education,
        require_contact=require_contact,
        require_achievements=require_achievements,
        require_one_page=require_one_page,
    )
    return check_resume_pdf(content, options)


@router.put("/resume/validation-status", response_model=SuccessResponse)
@rate_limit()
def update_validation_status(request: Request, payload: ValidationStatusRequest):
    _ = request
    status_saved = google_sheets.update_validation_status(payload.email, payload.is_valid)
    count_saved = google_sheets.increment_submission_count(payload.email)
    if not status_saved or not count_saved:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update validation status or submission count",
        )
    return SuccessResponse()


@router.put("/resume/score", response_model=SuccessResponse)
@rate_limit()
def update_review_score(request: Request, payload: ReviewScoreRequest):
    _ = request
    if not google_sheets.update_review_score(payload.email, payload.score):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update score")
    return SuccessResponse()


@router.put("/resume/linkedin", response_model=SuccessResponse)
@rate_limit()
def update_linkedin_url(request: Request, payload: LinkedInUrlRequest):
    _ = request
    if not google_sheets.update_linkedin_url(payload.email, payload.linkedin_url):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update LinkedIn URL",
        )
    return SuccessResponse()


@router.put("/resume/drive-link", response_model=SuccessResponse)
@rate_limit()
def update_drive_link(request: Request, payload: DriveLinkRequest):
    _ = request
    if not google_sheets.update_resume_drive_link(payload.email, payload.resume_drive_link):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update Resume Drive link",
        )
    return SuccessResponse()


@router.post("/resume/save-to-drive", response_model=SaveToDriveResponse)
@rate_limit(settings.upload_rate_limit)
async def save_resume_to_drive(request: Request, file: UploadFile = File(...), email: str = Form(...)):
    filename = file.filename or "resume.pdf"
    content = await _read_upload(file)
    _require_pdf_signature(filename, content)

    try:
        saved = google_drive.save_resume(email, content)
    except Exception as exc:  # noqa: BLE001 - Drive details stay in the logs
        logger.exception("drive_save_failed email=%s: %s", email, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save file to Google Drive",
        ) from exc
    return SaveToDriveResponse(file_id=saved["file_id"], web_view_link=saved.get("web_view_link"))


@router.post("/resume/review", response_model=ResumeReviewResponse)
@rate_limit(settings.review_rate_limit)
async def review_resume(
    request: Request,
    response: Response,
    payload: ResumeReviewRequest,
    background_tasks: BackgroundTasks,
):
    minutes_left = remaining_cooldown_minutes(request.cookies.get(REVIEW_COOKIE_NAME))
    if minutes_left is not None:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=cooldown_message(minutes_left))

    try:
        feedback = generate_resume_review(payload.text)
    except ReviewLLMError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    mark_review_completed(response)
    if payload.email:
        background_tasks.add_task(discord.send_notification, "RESUME_AI_FEEDBACK", payload.email)
    return ResumeReviewResponse(feedback=feedback)
