from __future__ import annotations

import math
import time

from fastapi import Response

from app.core.config import settings

REVIEW_COOKIE_NAME = "lastResumeReviewTime"


def _now_ms() -> int:
    return int(time.time() * 1000)


def remaining_cooldown_minutes(cookie_value: str | None, *, now_ms: int | None = None) -> int | None:
    """Minutes left before another review is allowed, or ``None`` when allowed."""
    if not settings.review_cooldown_enabled or not cookie_value:
        return None
    try:
        last_review_ms = int(cookie_value)
    except ValueError:
        return None

    window_ms = settings.review_cooldown_seconds * 1000
    elapsed = (now_ms if now_ms is not None else _now_ms()) - last_review_ms
    if elapsed >= window_ms:
        return None
    return math.ceil((window_ms - elapsed) / (60 * 1000))


def cooldown_message(minutes: int) -> str:
    return f"Rate limit exceeded. Please wait {minutes} minutes before requesting another review."


def mark_review_completed(response: Response, *, now_ms: int | None = None) -> None:
    if not settings.review_cooldown_enabled:
        return
    response.set_cookie(
        key=REVIEW_COOKIE_NAME,
        value=str(now_ms if now_ms is not None else _now_ms()),
        max_age=settings.review_cooldown_seconds,
        httponly=True,
        secure=settings.app_env == "production",
        samesite="strict",
    )
