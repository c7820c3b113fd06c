"""
Copilot Router

Text chat proxy to the configured workflow API.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from database.models import User
from api.auth.dependencies import get_current_active_user
from api.middleware.error_handler import ExternalServiceError, ServiceUnavailableError
from api.middleware.rate_limit import limiter, LIMIT_COPILOT
from services.copilot import CopilotClient, CopilotError, CopilotNotConfigured, get_copilot_client


router = APIRouter(prefix="/copilot", tags=["Copilot"])


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    reply: str
    navigate_to: Optional[str] = None


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(LIMIT_COPILOT)
async def chat(
    request: Request,
    data: ChatRequest,
    current_user: User = Depends(get_current_active_user),
    client: CopilotClient = Depends(get_copilot_client)
):
    """Forward one message to the copilot workflow."""
    try:
        reply = await client.chat(data.message)
    except CopilotNotConfigured as e:
        raise ServiceUnavailableError(str(e))
    except CopilotError as e:
        raise ExternalServiceError(f"Copilot request failed: {e}")

    return ChatResponse(reply=reply.reply, navigate_to=reply.navigate_to)
