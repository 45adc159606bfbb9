"""Forwarding of ``/api/chat/{sessionId}/*`` requests to the chat agent backend."""

import logging

import httpx

logger = logging.getLogger(__name__)

# Hop-by-hop and length headers that must not be copied across the proxy
_SKIP_HEADERS = {
    "host",
    "content-length",
    "transfer-encoding",
    "connection",
    "keep-alive",
    "content-encoding",
}


class AgentUnavailableError(Exception):
    """The agent backend could not be reached."""


class AgentProxy:
    """Relays chat requests to the agent instance named by the session id."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize proxy.

        Args:
            base_url: Agent backend URL; sessions live under ``/agents/{sessionId}``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def target_url(self, session_id: str, path: str) -> str:
        return f"{self.base_url}/agents/{session_id}/{path.lstrip('/')}"

    async def forward(
        self,
        session_id: str,
        path: str,
        method: str,
        headers: dict[str, str],
        query: str = "",
        body: bytes | None = None,
    ) -> httpx.Response:
        """
        Forward one request to the agent.

        Args:
            session_id: Agent instance name
            path: Path below ``/api/chat/{sessionId}``
            method: HTTP method
            headers: Incoming request headers
            query: Raw query string
            body: Request body; dropped for GET and DELETE

        Returns:
            The agent's response, fully read

        Raises:
            AgentUnavailableError: If the backend cannot be reached
        """
        url = self.target_url(session_id, path)
        if query:
            url = f"{url}?{query}"

        forward_headers = {k: v for k, v in headers.items() if k.lower() not in _SKIP_HEADERS}
        content = None if method.upper() in ("GET", "DELETE") else body

        try:
            return await self._client.request(
                method, url, headers=forward_headers, content=content
            )
        except httpx.RequestError as e:
            logger.error("Agent routing error for session %s: %s", session_id, e)
            raise AgentUnavailableError(str(e)) from e

    @staticmethod
    def response_headers(response: httpx.Response) -> dict[str, str]:
        return {k: v for k, v in response.headers.items() if k.lower() not in _SKIP_HEADERS}

    async def close(self):
        await self._client.aclose()
