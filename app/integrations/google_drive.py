from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from app.core.config import settings
from app.integrations.google_auth import get_credentials
from app.services.file_security import PDF_CONTENT_TYPE, resume_drive_filename

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.file"]


def _service():
    creds = get_credentials(SCOPES)
    return build("drive", "v3", credentials=creds, cache_discovery=False)


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def find_existing_file(service: Any, filename: str) -> str | None:
    folder_id = settings.google_drive_folder_id
    try:
        response = (
            service.files()
            .list(
                driveId=folder_id,
                includeItemsFromAllDrives=True,
                supportsAllDrives=True,
                corpora="drive",
                q=f"'{_quote(folder_id or '')}' in parents and name = '{_quote(filename)}' and trashed = false",
                fields="files(id, name)",
            )
            .execute()
        )
    except HttpError as exc:
        logger.warning("drive_lookup_failed name=%s: %s", filename, exc)
        return None
    files = response.get("files") or []
    if files and files[0].get("id"):
        return files[0]["id"]
    return None


def save_resume(email: str, content: bytes, mime_type: str = PDF_CONTENT_TYPE) -> dict[str, Any]:
    """Store the student's resume, replacing the previous upload if there is one."""
    if not settings.google_drive_folder_id:
        raise RuntimeError("Google Drive folder ID is not configured")

    service = _service()
    filename = resume_drive_filename(email)
    media = MediaIoBaseUpload(BytesIO(content), mimetype=mime_type, resumable=False)
    existing_id = find_existing_file(service, filename)

    try:
        if existing_id:
            saved = (
                service.files()
                .update(fileId=existing_id, media_body=media, supportsAllDrives=True, fields="id,webViewLink")
                .execute()
            )
        else:
            saved = (
                service.files()
                .create(
                    body={"name": filename, "parents": [settings.google_drive_folder_id]},
                    media_body=media,
                    supportsAllDrives=True,
                    fields="id,webViewLink",
                )
                .execute()
            )
    except HttpError as exc:
        raise RuntimeError(f"Google Drive API error: {exc}") from exc

    file_id = saved.get("id")
    if not file_id:
        raise RuntimeError("Failed to save file to Google Drive")
    logger.info("drive_resume_saved name=%s replaced=%s", filename, bool(existing_id))
    return {"file_id": file_id, "web_view_link": saved.get("webViewLink")}
