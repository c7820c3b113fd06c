"""
Copilot Service

Forwards a chat message to the configured workflow API and pulls the
assistant's reply out of the workflow response.
"""

import json
from dataclasses import dataclass
from typing import Optional

import httpx

from config.settings import settings
from config.logging_config import get_logger

logger = get_logger("copilot")


class CopilotError(Exception):
    """The workflow call failed or returned nothing usable."""
    pass


class CopilotNotConfigured(CopilotError):
    """No workflow URL is configured."""
    pass


# Known locations of the message text in a workflow run response
_REPLY_PATHS = (
    ("outputs", 0, "outputs", 0, "results", "message", "text"),
    ("outputs", 0, "outputs", 0, "results", "message", "data", "text"),
    ("outputs", 0, "outputs", 0, "artifacts", "message"),
    ("outputs", 0, "outputs", 0, "messages", 0, "message"),
)


def _walk(data, path):
    for key in path:
        if isinstance(key, int):
            if not isinstance(data, list) or len(data) <= key:
                return None
        elif not isinstance(data, dict):
            return None
        data = data[key] if isinstance(key, int) else data.get(key)
    return data


def extract_message_text(data: dict) -> Optional[str]:
    """First non-empty message text found in a workflow response."""
    for path in _REPLY_PATHS:
        text = _walk(data, path)
        if isinstance(text, str) and text.strip():
            return text
    return None


@dataclass(frozen=True)
class CopilotReply:
    reply: str
    navigate_to: Optional[str] = None


def interpret_message(text: str) -> CopilotReply:
    """
    Turn the workflow's message text into a reply.

    The workflow may answer with a JSON envelope
    ``{"tonavigate": "0"|"1", "rsp": ..., "navto": ...}`` (older flows use
    ``message``/``url``); anything else is returned as plain text.
    """
    cleaned = " ".join(text.split())
    try:
        envelope = json.loads(cleaned)
    except ValueError:
        return CopilotReply(reply=text.strip())

    if not isinstance(envelope, dict):
        return CopilotReply(reply=text.strip())

    message = envelope.get("rsp") or envelope.get("message")
    if envelope.get("tonavigate") == "1":
        target = (envelope.get("navto") or envelope.get("url") or "").strip()
        if target:
            return CopilotReply(reply=message or f"Navigating to {target}", navigate_to=target)
        return CopilotReply(reply=message or "Navigation requested but no valid URL provided.")

    return CopilotReply(reply=message or "No response provided.")


class CopilotClient:
    """HTTP client for the chat workflow."""

    def __init__(
        self,
        workflow_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.workflow_url = workflow_url or settings.copilot_workflow_url
        self.api_key = api_key or settings.copilot_api_key
        self.timeout = timeout or settings.copilot_timeout
        self.transport = transport

    async def chat(self, message: str) -> CopilotReply:
        """
        Send one user message and return the assistant reply.

        Raises:
            CopilotNotConfigured: If no workflow URL is set
            CopilotError: On transport failure or an unreadable response
        """
        if not self.workflow_url:
            raise CopilotNotConfigured("Copilot workflow is not configured")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key

        payload = {
            "input_value": message,
            "output_type": "chat",
            "input_type": "chat",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.workflow_url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Copilot workflow returned {e.response.status_code}")
            raise CopilotError(f"Workflow returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Copilot workflow request failed: {e}")
            raise CopilotError("Workflow request failed") from e
        except ValueError as e:
            raise CopilotError("Workflow response is not valid JSON") from e

        text = extract_message_text(data) if isinstance(data, dict) else None
        if text is None:
            raise CopilotError("No message text found in response")

        return interpret_message(text)


def get_copilot_client() -> CopilotClient:
    """FastAPI dependency returning a configured copilot client."""
    return CopilotClient()
