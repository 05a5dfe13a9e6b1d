from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

EMBED_COLOR = 0x00FF00

EVENT_TITLES = {
    "RESUME_SUBMITTED": "New Resume Review Submitted! 📝",
    "RESUME_REVIEW_STARTED": "Resume validation started 🔍",
    "UNAUTHORIZED_ACCESS_ATTEMPT": "Unauthorized access attempt ⚠️",
    "RESUME_AI_FEEDBACK": "AI feedback generated 🤖",
}

EVENT_DESCRIPTIONS = {
    "RESUME_SUBMITTED": "A new resume has been submitted for review.",
    "RESUME_REVIEW_STARTED": "Resume validation started for {email}",
    "UNAUTHORIZED_ACCESS_ATTEMPT": "Unauthorized access attempt from {email}",
    "RESUME_AI_FEEDBACK": "AI feedback generated for {email}'s resume",
}


def webhook_ready() -> bool:
    return bool(settings.discord_webhook_url)


def build_message(event: str, email: str, *, now: datetime | None = None) -> dict[str, Any]:
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return {
        "embeds": [
            {
                "title": EVENT_TITLES.get(event, "Resume notification"),
                "description": EVENT_DESCRIPTIONS.get(event, "Unknown event").format(email=email),
                "fields": [{"name": "Student Email", "value": email, "inline": True}],
                "color": EMBED_COLOR,
                "timestamp": timestamp,
            }
        ]
    }


def send_notification(event: str, email: str) -> bool:
    if not webhook_ready():
        logger.info("Discord webhook is not configured; skipping %s.", event)
        return False

    try:
        with httpx.Client(timeout=10.0) as client:
            response = client.post(settings.discord_webhook_url or "", json=build_message(event, email))
        response.raise_for_status()
        return True
    except Exception as exc:  # noqa: BLE001 - notifications never block the review flow
        logger.exception("discord_notify_failed event=%s: %s", event, exc)
        return False
