"""HTTP client for the chat agent backend."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    """A message in an agent conversation."""

    role: str
    content: str
    id: str | None = None
    timestamp: int | None = None


class ChatState(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    is_processing: bool = Field(default=False, alias="isProcessing")
    model: str | None = None


class ChatResponse(BaseModel):
    """Envelope returned by the agent: ``{success, data|error}``."""

    success: bool
    data: ChatState | None = None
    error: str | None = None

    @property
    def last_message(self) -> ChatMessage | None:
        if self.data is None or not self.data.messages:
            return None
        return self.data.messages[-1]


class ChatAgentClient:
    """
    Client for a chat agent reached through ``/api/chat/{sessionId}/*``.

    The agent is an opaque collaborator: it keeps the conversation and
    answers with the full message list. Failures are reported in the
    returned envelope rather than raised; there are no retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize agent client.

        Args:
            base_url: Server exposing the chat routes (a Loka server or the agent itself)
            timeout: Request timeout in seconds
            headers: Extra headers sent with every request (e.g. X-Tenant-ID)
            transport: Optional httpx transport, used to call an ASGI app in-process
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def send_message(
        self, session_id: str, message: str, model: str | None = None
    ) -> ChatResponse:
        """
        Send a user message and return the agent's conversation state.

        Args:
            session_id: Conversation identifier
            message: User message
            model: Optional model override understood by the agent

        Returns:
            ChatResponse; ``success`` is False when the request failed
        """
        payload: dict[str, Any] = {"message": message}
        if model:
            payload["model"] = model

        return await self._request("POST", f"/api/chat/{session_id}/chat", json=payload)

    async def get_messages(self, session_id: str) -> ChatResponse:
        """Fetch the current conversation state."""
        return await self._request("GET", f"/api/chat/{session_id}/messages")

    async def clear_messages(self, session_id: str) -> ChatResponse:
        return await self._request("DELETE", f"/api/chat/{session_id}/clear")

    async def _request(self, method: str, path: str, **kwargs: Any) -> ChatResponse:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return ChatResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error("Chat agent returned %s for %s %s", e.response.status_code, method, path)
            return ChatResponse(success=False, error=_error_message(e.response))
        except httpx.RequestError as e:
            logger.error("Failed to reach chat agent: %s", e)
            return ChatResponse(success=False, error=f"Failed to reach chat agent: {e}")
        except ValueError as e:
            # Covers invalid JSON and envelope validation errors
            logger.error("Invalid response from chat agent: %s", e)
            return ChatResponse(success=False, error="Invalid response from chat agent")

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Chat agent error ({response.status_code})"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Chat agent error ({response.status_code})"
