from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from app.core.rate_limit import rate_limit
from app.integrations import discord, google_sheets
from app.schemas.resume import AllowedEmailRequest, SuccessResponse

router = APIRouter()

NOT_AUTHORIZED_MESSAGE = (
    "Email not authorized. For now, this is only available to Uplift Code Camp students. "
    "Please contact us if you are a student and want to use this service."
)


@router.post("/access/allowed-emails", response_model=SuccessResponse)
@rate_limit()
def check_allowed_email(request: Request, payload: AllowedEmailRequest):
    _ = request
    email = payload.email.strip()
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")

    if not google_sheets.is_email_allowed(email):
        # Returned rather than raised so the notification still runs.
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": NOT_AUTHORIZED_MESSAGE},
            background=BackgroundTask(discord.send_notification, "UNAUTHORIZED_ACCESS_ATTEMPT", email),
        )
    return SuccessResponse()
