from fastapi import APIRouter, HTTPException, Request, status

from app.core.rate_limit import rate_limit
from app.integrations import discord
from app.schemas.resume import DiscordNotifyRequest, SuccessResponse

router = APIRouter()


@router.post("/notifications/discord", response_model=SuccessResponse)
@rate_limit()
def notify_discord(request: Request, payload: DiscordNotifyRequest):
    _ = request
    if not discord.webhook_ready():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Discord webhook not configured",
        )
    if not discord.send_notification(payload.event, payload.email):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send notification",
        )
    return SuccessResponse()
