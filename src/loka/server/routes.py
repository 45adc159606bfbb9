"""API routes for the Loka server."""

import logging
import re
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from fastapi import APIRouter, Body, Header, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from loka import __version__
from loka.agent.proxy import AgentProxy, AgentUnavailableError
from loka.config.schema import LokaConfig
from loka.store.controller import AppController
from loka.store.registry import ControllerRegistry
from loka.store.schema import (
    BrandTermCreate,
    BrandTermUpdate,
    HistoryItemCreate,
    SessionCreate,
    SessionTitleUpdate,
)
from loka.server.errors import APIError, BadRequestError, NotFoundError, error_response

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 40

CHAT_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


def ok(data: object) -> dict:
    return {"success": True, "data": data}


def session_title(first_message: str | None, now: datetime) -> str:
    """Derive a session title from the first message, or fall back to a timestamp.

    Args:
        first_message: The conversation's opening message, if any
        now: Local time used for the timestamp suffix

    Returns:
        Title such as "Summer linen dress, breathable... • 10/19, 02:30 PM"
    """
    stamp = f"{now:%m/%d, %I:%M %p}"
    if first_message and first_message.strip():
        clean = re.sub(r"\s+", " ", first_message.strip())
        if len(clean) > TITLE_MAX_LENGTH:
            clean = clean[: TITLE_MAX_LENGTH - 3] + "..."
        return f"{clean} • {stamp}"
    return f"Chat {stamp}"


@contextmanager
def _failure(message: str) -> Iterator[None]:
    """Turn unexpected errors into a logged 500 with a fixed message."""
    try:
        yield
    except APIError:
        raise
    except Exception as e:
        logger.exception(message)
        raise APIError(message) from e


def create_router(
    config: LokaConfig, registry: ControllerRegistry, proxy: AgentProxy
) -> APIRouter:
    """Create API router backed by per-tenant record stores.

    Args:
        config: Loka configuration
        registry: Source of each tenant's controller
        proxy: Forwarder for chat requests

    Returns:
        Configured API router
    """
    router = APIRouter()
    default_tenant = config.storage.default_tenant

    def controller_for(tenant: str | None) -> AppController:
        return registry.get(tenant or default_tenant)

    def touch_session(tenant: str | None, session_id: str) -> bool:
        return controller_for(tenant).update_session_activity(session_id)

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    # Sessions

    @router.get("/api/sessions")
    def list_sessions(x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to retrieve sessions"):
            sessions = controller_for(x_tenant_id).list_sessions()
        return ok([s.to_json_dict() for s in sessions])

    @router.post("/api/sessions")
    def create_session(
        payload: SessionCreate | None = Body(default=None),
        x_tenant_id: str | None = Header(default=None),
    ) -> dict:
        payload = payload or SessionCreate()
        with _failure("Failed to create session"):
            session_id = payload.session_id or str(uuid.uuid4())
            title = payload.title or session_title(payload.first_message, datetime.now())
            controller_for(x_tenant_id).add_session(session_id, title)
        return ok({"sessionId": session_id, "title": title})

    @router.delete("/api/sessions")
    def clear_sessions(x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to clear all sessions"):
            deleted_count = controller_for(x_tenant_id).clear_all_sessions()
        return ok({"deletedCount": deleted_count})

    @router.delete("/api/sessions/{session_id}")
    def delete_session(session_id: str, x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to delete session"):
            deleted = controller_for(x_tenant_id).remove_session(session_id)
            if not deleted:
                raise NotFoundError("Session not found")
        return ok({"deleted": True})

    @router.put("/api/sessions/{session_id}/title")
    def update_session_title(
        session_id: str,
        payload: SessionTitleUpdate,
        x_tenant_id: str | None = Header(default=None),
    ) -> dict:
        if not payload.title:
            raise BadRequestError("Title is required")
        with _failure("Failed to update session title"):
            updated = controller_for(x_tenant_id).update_session_title(session_id, payload.title)
            if not updated:
                raise NotFoundError("Session not found")
        return ok({"title": payload.title})

    # Brand terms

    @router.get("/api/brand-terms")
    def list_brand_terms(x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to retrieve brand terms"):
            terms = controller_for(x_tenant_id).list_brand_terms()
        return ok([t.to_json_dict() for t in terms])

    @router.post("/api/brand-terms", status_code=201)
    def add_brand_term(
        payload: BrandTermCreate, x_tenant_id: str | None = Header(default=None)
    ) -> dict:
        if not payload.term.strip():
            raise BadRequestError("Term is required")
        with _failure("Failed to add brand term"):
            term = controller_for(x_tenant_id).add_brand_term(payload)
        return ok(term.to_json_dict())

    @router.put("/api/brand-terms/{term_id}")
    def update_brand_term(
        term_id: str,
        payload: BrandTermUpdate,
        x_tenant_id: str | None = Header(default=None),
    ) -> dict:
        if not payload.term.strip():
            raise BadRequestError("Term is required")
        with _failure("Failed to update brand term"):
            updated = controller_for(x_tenant_id).update_brand_term(term_id, payload)
            if not updated:
                raise NotFoundError("Brand term not found")
        return ok({"id": term_id})

    @router.delete("/api/brand-terms/{term_id}")
    def delete_brand_term(term_id: str, x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to delete brand term"):
            deleted = controller_for(x_tenant_id).delete_brand_term(term_id)
            if not deleted:
                raise NotFoundError("Brand term not found")
        return ok({"id": term_id})

    @router.put("/api/brand-terms/{term_id}/translations")
    def update_brand_term_translations(
        term_id: str,
        translations: dict[str, str],
        x_tenant_id: str | None = Header(default=None),
    ) -> dict:
        with _failure("Failed to update translations"):
            updated = controller_for(x_tenant_id).update_brand_term_translations(
                term_id, translations
            )
            if not updated:
                raise NotFoundError("Brand term not found")
        return ok({"id": term_id})

    # History

    @router.get("/api/history")
    def list_history(x_tenant_id: str | None = Header(default=None)) -> dict:
        with _failure("Failed to retrieve history"):
            history = controller_for(x_tenant_id).list_history()
        return ok([h.to_json_dict() for h in history])

    @router.post("/api/history", status_code=201)
    def add_history_item(
        payload: HistoryItemCreate, x_tenant_id: str | None = Header(default=None)
    ) -> dict:
        if not payload.source_text or payload.languages is None:
            raise BadRequestError("Missing required fields")
        with _failure("Failed to add history item"):
            item = controller_for(x_tenant_id).add_history_item(payload)
        return ok(item.to_json_dict())

    # Chat agent

    @router.api_route("/api/chat/{session_id}/{path:path}", methods=CHAT_METHODS)
    async def chat(
        session_id: str,
        path: str,
        request: Request,
        x_tenant_id: str | None = Header(default=None),
    ) -> Response:
        """Forward a chat request to the session's agent."""
        if request.method != "GET":
            try:
                await run_in_threadpool(touch_session, x_tenant_id, session_id)
            except Exception:
                logger.warning("Could not record activity for session %s", session_id, exc_info=True)

        body = await request.body()
        try:
            upstream = await proxy.forward(
                session_id,
                path,
                request.method,
                dict(request.headers),
                query=request.url.query,
                body=body,
            )
        except AgentUnavailableError:
            return error_response(502, "Failed to route request to chat agent")

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=proxy.response_headers(upstream),
        )

    return router
