from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    app_env: str
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    upload_rate_limit: str
    review_rate_limit: str
    max_upload_bytes: int
    enforce_filename_format: bool
    review_cooldown_enabled: bool
    review_cooldown_seconds: int
    google_sheets_id: str | None
    google_sheet_name: str
    google_sheets_timezone: str
    google_service_account_json: str | None
    google_service_account_file: str | None
    google_client_email: str | None
    google_private_key: str | None
    google_drive_folder_id: str | None
    discord_webhook_url: str | None


settings = Settings(
    app_env=(_get_env("APP_ENV", "development") or "development").strip().lower(),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    upload_rate_limit=_get_env("UPLOAD_RATE_LIMIT", "20/minute") or "20/minute",
    review_rate_limit=_get_env("REVIEW_RATE_LIMIT", "5/minute") or "5/minute",
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 1 * 1024 * 1024),
    enforce_filename_format=_get_env_bool("ENFORCE_FILENAME_FORMAT", True),
    review_cooldown_enabled=_get_env_bool("REVIEW_COOLDOWN_ENABLED", True),
    review_cooldown_seconds=_get_env_int("REVIEW_COOLDOWN_SECONDS", 60 * 60),
    google_sheets_id=_get_env("GOOGLE_SHEETS_ID"),
    google_sheet_name=_get_env("GOOGLE_SHEET_NAME", "Sheet1") or "Sheet1",
    google_sheets_timezone=_get_env("GOOGLE_SHEETS_TIMEZONE", "Asia/Manila") or "Asia/Manila",
    google_service_account_json=_get_env("GOOGLE_SERVICE_ACCOUNT_JSON"),
    google_service_account_file=_get_env("GOOGLE_SERVICE_ACCOUNT_FILE"),
    google_client_email=_get_env("GOOGLE_SHEETS_CLIENT_EMAIL"),
    google_private_key=_get_env("GOOGLE_SHEETS_PRIVATE_KEY"),
    google_drive_folder_id=_get_env("GOOGLE_DRIVE_FOLDER_ID"),
    discord_webhook_url=_get_env("DISCORD_WEBHOOK_URL"),
)

if settings.max_upload_bytes <= 0:
    raise RuntimeError("MAX_UPLOAD_BYTES must be a positive integer.")
