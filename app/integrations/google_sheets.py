"""Student tracking spreadsheet.

One row per student, keyed by the email in column A:

    A email | C validation status | D score | E last update
    F LinkedIn URL | G submission count | H resume drive link
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from googleapiclient.discovery import build

from app.core.config import settings
from app.integrations.google_auth import get_credentials

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

EMAIL_COLUMN = "A"
STATUS_COLUMN = "C"
SCORE_COLUMN = "D"
UPDATED_AT_COLUMN = "E"
LINKEDIN_COLUMN = "F"
SUBMISSIONS_COLUMN = "G"
DRIVE_LINK_COLUMN = "H"

STATUS_PASSED = "First scan ok"
STATUS_NEEDS_FIXES = "Fixes required"
FIRST_SCAN_SCORE = 10


class StudentNotFoundError(LookupError):
    pass


def _service():
    creds = get_credentials(SCOPES)
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


def _range(column: str, row: int | None = None) -> str:
    cell = f"{column}{row}" if row is not None else f"{column}:{column}"
    return f"'{settings.google_sheet_name}'!{cell}"


def _get_values(service: Any, cell_range: str) -> list[list[Any]]:
    response = (
        service.spreadsheets()
        .values()
        .get(spreadsheetId=settings.google_sheets_id, range=cell_range)
        .execute()
    )
    return response.get("values") or []


def _set_value(service: Any, cell_range: str, value: Any) -> None:
    (
        service.spreadsheets()
        .values()
        .update(
            spreadsheetId=settings.google_sheets_id,
            range=cell_range,
            valueInputOption="RAW",
            body={"values": [[value]]},
        )
        .execute()
    )


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def format_sheet_timestamp(now: datetime | None = None) -> str:
    """Timestamp in the sheet's locale, e.g. ``10/19/2026, 3:04:05 PM``."""
    local = (now or datetime.now(tz=ZoneInfo("UTC"))).astimezone(ZoneInfo(settings.google_sheets_timezone))
    hour = local.hour % 12 or 12
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S} {local:%p}"


def find_row_index(service: Any, email: str) -> int:
    rows = _get_values(service, _range(EMAIL_COLUMN))
    wanted = _normalize_email(email)
    for index, row in enumerate(rows):
        if row and isinstance(row[0], str) and _normalize_email(row[0]) == wanted:
            return index + 1
    raise StudentNotFoundError(f"Email {email} not found in the Google Sheet")


def _touch_updated_at(service: Any, row: int) -> None:
    _set_value(service, _range(UPDATED_AT_COLUMN, row), format_sheet_timestamp())


def get_allowed_emails() -> list[str]:
    try:
        rows = _get_values(_service(), _range(EMAIL_COLUMN))
    except Exception as exc:  # noqa: BLE001 - an unreadable sheet allows nobody
        logger.exception("sheets_allowed_emails_failed: %s", exc)
        return []
    if not rows:
        logger.error("sheets_allowed_emails_empty sheet=%s", settings.google_sheet_name)
        return []
    return [
        _normalize_email(value)
        for row in rows
        for value in row
        if isinstance(value, str) and value.strip()
    ]


def is_email_allowed(email: str) -> bool:
    return _normalize_email(email) in get_allowed_emails()


def update_validation_status(email: str, is_valid: bool) -> bool:
    try:
        service = _service()
        row = find_row_index(service, email)
        _set_value(service, _range(STATUS_COLUMN, row), STATUS_PASSED if is_valid else STATUS_NEEDS_FIXES)
        _set_value(service, _range(SCORE_COLUMN, row), FIRST_SCAN_SCORE)
        _touch_updated_at(service, row)
        return True
    except Exception as exc:  # noqa: BLE001 - callers report a generic failure
        logger.exception("sheets_update_validation_status_failed email=%s: %s", email, exc)
        return False


def update_review_score(email: str, score: float) -> bool:
    try:
        service = _service()
        row = find_row_index(service, email)
        _set_value(service, _range(SCORE_COLUMN, row), score)
        _touch_updated_at(service, row)
        return True
    except Exception as exc:  # noqa: BLE001
        logger.exception("sheets_update_score_failed email=%s score=%s: %s", email, score, exc)
        return False


def update_linkedin_url(email: str, linkedin_url: str) -> bool:
    try:
        service = _service()
        row = find_row_index(service, email)
        _set_value(service, _range(LINKEDIN_COLUMN, row), linkedin_url)
        return True
    except Exception as exc:  # noqa: BLE001
        logger.exception("sheets_update_linkedin_failed email=%s: %s", email, exc)
        return False


def update_resume_drive_link(email: str, drive_link: str) -> bool:
    try:
        service = _service()
        row = find_row_index(service, email)
        _set_value(service, _range(DRIVE_LINK_COLUMN, row), drive_link)
        return True
    except Exception as exc:  # noqa: BLE001
        logger.exception("sheets_update_drive_link_failed email=%s: %s", email, exc)
        return False


def increment_submission_count(email: str) -> bool:
    try:
        service = _service()
        row = find_row_index(service, email)
        values = _get_values(service, _range(SUBMISSIONS_COLUMN, row))
        raw = values[0][0] if values and values[0] else ""
        try:
            current = int(str(raw).strip()) if str(raw).strip() else 0
        except ValueError:
            current = 0
        _set_value(service, _range(SUBMISSIONS_COLUMN, row), current + 1)
        return True
    except Exception as exc:  # noqa: BLE001
        logger.exception("sheets_increment_submissions_failed email=%s: %s", email, exc)
        return False
