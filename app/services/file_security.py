from __future__ import annotations

import re
from datetime import datetime
from typing import Any

PDF_MAGIC = b"%PDF-"
PDF_CONTENT_TYPE = "application/pdf"


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return _safe_str(filename.rsplit(".", 1)[-1], 20).lower()


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = extension_from_filename(filename or "")
    if ext != "pdf":
        raise ValueError(f"Unsupported file type '.{ext}'. Only .pdf files are accepted.")
    if not content.startswith(PDF_MAGIC):
        raise ValueError("File signature does not match .pdf content.")


def _filename_pattern(year: int) -> re.Pattern[str]:
    return re.compile(rf"^[A-Za-z]+_[A-Za-z]+_{year}\.pdf$", re.IGNORECASE)


def validate_resume_upload(
    *,
    filename: str,
    content_type: str | None,
    size: int,
    max_bytes: int,
    current_year: int | None = None,
    enforce_filename_format: bool = True,
) -> list[str]:
    """Return the reasons a resume upload should be rejected, empty when it is acceptable."""
    errors: list[str] = []
    year = current_year or datetime.now().year

    media_type = _safe_str((content_type or "").split(";")[0], 120).lower()
    if media_type != PDF_CONTENT_TYPE:
        errors.append("Only PDF files are allowed")

    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        errors.append(f"File size must be less than {limit_mb:g}MB")

    if enforce_filename_format and not _filename_pattern(year).match(_safe_str(filename)):
        errors.append(
            f"File name must be in the format: Name_Title_{year}.pdf "
            f"(e.g., AlexCruz_FullStackDeveloper_{year}.pdf)"
        )

    return errors


def username_from_email(email: str) -> str:
    return _safe_str(email).split("@")[0]


def resume_drive_filename(email: str) -> str:
    return f"{username_from_email(email)}_resume.pdf"
