"""HTTP client for the Loka REST API."""

from typing import Any

import httpx

from loka.store.schema import (
    BrandTerm,
    BrandTermCreate,
    HistoryItem,
    HistoryItemCreate,
    SessionInfo,
)


class LokaAPIError(Exception):
    """The server answered with ``success: false`` or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LokaClient:
    """
    Synchronous client for a running Loka server.

    Every call unwraps the ``{success, data|error}`` envelope and raises
    :class:`LokaAPIError` on failure.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8787",
        tenant: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Loka server URL
            tenant: Tenant id sent as X-Tenant-ID (server default when None)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        headers = {"X-Tenant-ID": tenant} if tenant else None
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, headers=headers, transport=transport
        )

    def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise LokaAPIError(f"Failed to reach Loka server: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise LokaAPIError(
                f"Unexpected response ({response.status_code})", response.status_code
            ) from e

        if not isinstance(body, dict):
            raise LokaAPIError("Response is not an API envelope", response.status_code)
        if not response.is_success or not body.get("success"):
            raise LokaAPIError(body.get("error") or "Unknown error", response.status_code)
        return body.get("data")

    # Sessions

    def list_sessions(self) -> list[SessionInfo]:
        return [SessionInfo.model_validate(s) for s in self._call("GET", "/api/sessions")]

    def create_session(
        self,
        title: str | None = None,
        session_id: str | None = None,
        first_message: str | None = None,
    ) -> dict[str, str]:
        """Register a session. Returns ``{"sessionId", "title"}``."""
        payload = {"title": title, "sessionId": session_id, "firstMessage": first_message}
        return self._call(
            "POST", "/api/sessions", json={k: v for k, v in payload.items() if v is not None}
        )

    def delete_session(self, session_id: str) -> None:
        self._call("DELETE", f"/api/sessions/{session_id}")

    def clear_sessions(self) -> int:
        return self._call("DELETE", "/api/sessions")["deletedCount"]

    def update_session_title(self, session_id: str, title: str) -> None:
        self._call("PUT", f"/api/sessions/{session_id}/title", json={"title": title})

    # Brand terms

    def list_brand_terms(self) -> list[BrandTerm]:
        return [BrandTerm.model_validate(t) for t in self._call("GET", "/api/brand-terms")]

    def add_brand_term(self, term: str, variations: str = "", notes: str = "") -> BrandTerm:
        payload = BrandTermCreate(term=term, variations=variations, notes=notes)
        data = self._call("POST", "/api/brand-terms", json=payload.to_json_dict())
        return BrandTerm.model_validate(data)

    def update_brand_term(self, term: BrandTerm) -> None:
        self._call("PUT", f"/api/brand-terms/{term.id}", json=term.to_json_dict())

    def delete_brand_term(self, term_id: str) -> None:
        self._call("DELETE", f"/api/brand-terms/{term_id}")

    def update_brand_term_translations(self, term_id: str, translations: dict[str, str]) -> None:
        self._call("PUT", f"/api/brand-terms/{term_id}/translations", json=translations)

    # History

    def list_history(self) -> list[HistoryItem]:
        return [HistoryItem.model_validate(h) for h in self._call("GET", "/api/history")]

    def add_history_item(self, item: HistoryItemCreate) -> HistoryItem:
        data = self._call("POST", "/api/history", json=item.to_json_dict())
        return HistoryItem.model_validate(data)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LokaClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
