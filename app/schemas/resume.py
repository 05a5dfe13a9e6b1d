from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NotificationEventType = Literal[
    "RESUME_SUBMITTED",
    "RESUME_REVIEW_STARTED",
    "UNAUTHORIZED_ACCESS_ATTEMPT",
    "RESUME_AI_FEEDBACK",
]


class ValidationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    require_summary: bool = True
    require_highlights: bool = True
    require_experience: bool = True
    require_education: bool = True
    require_contact: bool = True
    require_achievements: bool = False
    require_one_page: bool = True


class ValidationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class ExtractTextResponse(BaseModel):
    text: str
    num_pages: int = Field(ge=0)


class ResumeCheck(BaseModel):
    verdict: ValidationVerdict
    text: str = ""
    num_pages: int = Field(default=0, ge=0)


class ValidationStatusRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    is_valid: bool


class ReviewScoreRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    score: float


class LinkedInUrlRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    linkedin_url: str = Field(min_length=1, max_length=2000)


class DriveLinkRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    resume_drive_link: str = Field(min_length=1, max_length=2000)


class SaveToDriveResponse(BaseModel):
    success: bool = True
    file_id: str
    web_view_link: str | None = None


class ResumeReviewRequest(BaseModel):
    text: str = Field(min_length=1, max_length=50000)
    email: str | None = Field(default=None, max_length=320)


class ResumeReviewResponse(BaseModel):
    feedback: str


class AllowedEmailRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)


class DiscordNotifyRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    event: NotificationEventType = "RESUME_SUBMITTED"


class SuccessResponse(BaseModel):
    success: bool = True
