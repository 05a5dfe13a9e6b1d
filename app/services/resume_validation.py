from __future__ import annotations

import logging
import re

from app.parsing.models import LinePolicy
from app.parsing.parse import DocumentExtractionError, extract_document_text
from app.schemas.resume import ResumeCheck, ValidationOptions, ValidationVerdict

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = ValidationOptions()

VALIDATION_FAILED_MESSAGE = "Failed to validate resume. Please ensure the PDF is not corrupted and try again."

# Header synonyms; unanchored, so a line can count for several sections.
SECTION_PATTERNS: dict[str, re.Pattern[str]] = {
    "summary": re.compile(
        r"(summary|about me|about|profile|professional summary|career summary)", re.IGNORECASE
    ),
    "highlights": re.compile(
        r"(highlights|key skills|core competencies|skills|technical skills|professional skills)", re.IGNORECASE
    ),
    "experience": re.compile(
        r"(experience|work experience|professional experience|employment history|work history)", re.IGNORECASE
    ),
    "education": re.compile(r"(education|academic background|academic history|qualifications)", re.IGNORECASE),
    "achievements": re.compile(r"(achievements|accomplishments|awards|recognition|honors)", re.IGNORECASE),
    "contact": re.compile(r"(contact|contact information|contact details|get in touch)", re.IGNORECASE),
}

# The portfolio pattern matches any domain, LinkedIn and GitHub URLs included.
CONTACT_PATTERNS: dict[str, re.Pattern[str]] = {
    "email": re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
    "linkedin": re.compile(r"(?:linkedin\.com/in/|linkedin\.com/profile/)[a-zA-Z0-9-]+"),
    "portfolio": re.compile(r"(?:https?://)?(?:www\.)?[a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:/[a-zA-Z0-9-]+)*"),
    "github": re.compile(r"(?:github\.com/|gitlab\.com/)[a-zA-Z0-9-]+"),
}

REQUIRED_SECTION_ERRORS: tuple[tuple[str, str, str], ...] = (
    ("summary", "require_summary", "Missing required section: Summary/About Me"),
    ("highlights", "require_highlights", "Missing required section: Highlights/Skills"),
    ("experience", "require_experience", "Missing required section: Experience"),
    ("education", "require_education", "Missing required section: Education"),
)

REQUIRED_CONTACT_ERRORS: tuple[tuple[str, str], ...] = (
    ("email", "Missing required contact information: Email address"),
    ("linkedin", "Missing required contact information: LinkedIn profile"),
    ("portfolio", "Missing required contact information: Portfolio link"),
)


def detect_sections(text_lower: str) -> set[str]:
    found: set[str] = set()
    for line in text_lower.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        for section, pattern in SECTION_PATTERNS.items():
            if pattern.search(stripped):
                found.add(section)
    return found


def detect_contact_channels(text_lower: str) -> set[str]:
    return {channel for channel, pattern in CONTACT_PATTERNS.items() if pattern.search(text_lower)}


def validate_resume(
    text: str,
    num_pages: int,
    options: ValidationOptions | None = None,
) -> ValidationVerdict:
    """Apply the structural rule set to extracted resume text.

    Rule failures are returned as data. Errors and warnings keep evaluation
    order: page count, the four required sections, the achievements warning,
    then email, LinkedIn, portfolio and GitHub/GitLab.
    """
    active = options or DEFAULT_OPTIONS
    errors: list[str] = []
    warnings: list[str] = []
    text_lower = (text or "").lower()

    if active.require_one_page and num_pages > 1:
        errors.append("Resume must be one page")

    found_sections = detect_sections(text_lower)
    for section, flag, message in REQUIRED_SECTION_ERRORS:
        if getattr(active, flag) and section not in found_sections:
            errors.append(message)
    if active.require_achievements and "achievements" not in found_sections:
        warnings.append("Missing recommended section: Achievements")

    if active.require_contact:
        found_contact = detect_contact_channels(text_lower)
        for channel, message in REQUIRED_CONTACT_ERRORS:
            if channel not in found_contact:
                errors.append(message)
        if "github" not in found_contact:
            warnings.append("Missing recommended contact information: GitHub/GitLab profile")

    return ValidationVerdict(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def failed_verdict() -> ValidationVerdict:
    return ValidationVerdict(is_valid=False, errors=(VALIDATION_FAILED_MESSAGE,), warnings=())


def check_resume_pdf(
    content: bytes,
    options: ValidationOptions | None = None,
    policy: LinePolicy | None = None,
) -> ResumeCheck:
    try:
        document = extract_document_text(content, policy)
    except DocumentExtractionError as exc:
        logger.warning("resume_validation_extract_failed bytes=%s: %s", len(content), exc.__cause__ or exc)
        return ResumeCheck(verdict=failed_verdict())

    verdict = validate_resume(document.text, document.num_pages, options)
    logger.info(
        "resume_validated valid=%s errors=%s warnings=%s pages=%s",
        verdict.is_valid,
        len(verdict.errors),
        len(verdict.warnings),
        document.num_pages,
    )
    return ResumeCheck(verdict=verdict, text=document.text, num_pages=document.num_pages)
