"""Per-tenant record store backed by a durable key-value namespace."""

import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from loka.storage.kv import KeyValueStore, StorageError
from loka.store.schema import (
    BrandTerm,
    BrandTermCreate,
    BrandTermUpdate,
    HistoryItem,
    HistoryItemCreate,
    SessionInfo,
)

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"
BRAND_TERM_PREFIX = "brandTerm:"
HISTORY_PREFIX = "history:"


class PersistenceError(StorageError):
    """A mutation could not be written to durable storage.

    The in-memory copy is left untouched, so it still matches durable state.
    """


class AppController:
    """Mirrors one tenant's sessions, brand terms and history into memory.

    The durable namespace is read once, on the first operation. Every write
    persists the single affected key before the in-memory map changes; a
    failed write raises :class:`PersistenceError` and changes nothing.
    Operations are serialized per controller.
    """

    def __init__(self, kv: KeyValueStore, clock: Callable[[], float] = time.time):
        """Initialize the controller.

        Args:
            kv: Durable key-value namespace for this tenant
            clock: Returns the current time in seconds since the epoch
        """
        self._kv = kv
        self._clock = clock
        self._sessions: dict[str, SessionInfo] = {}
        self._brand_terms: dict[str, BrandTerm] = {}
        self._history: dict[str, HistoryItem] = {}
        self._loaded = False
        self._lock = threading.RLock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        stored = self._kv.items()
        for key, value in stored.items():
            try:
                if key.startswith(SESSION_PREFIX):
                    self._sessions[key[len(SESSION_PREFIX) :]] = SessionInfo.model_validate(value)
                elif key.startswith(BRAND_TERM_PREFIX):
                    self._brand_terms[key[len(BRAND_TERM_PREFIX) :]] = BrandTerm.model_validate(
                        value
                    )
                elif key.startswith(HISTORY_PREFIX):
                    self._history[key[len(HISTORY_PREFIX) :]] = HistoryItem.model_validate(value)
            except ValidationError as e:
                logger.warning("Skipping malformed record %s: %s", key, e)

        self._loaded = True
        logger.debug(
            "Loaded %d sessions, %d brand terms, %d history items",
            len(self._sessions),
            len(self._brand_terms),
            len(self._history),
        )

    @contextmanager
    def _operation(self) -> Iterator[None]:
        with self._lock:
            self._ensure_loaded()
            yield

    def _persist(self, key: str, value: Any) -> None:
        try:
            self._kv.put(key, value)
        except StorageError as e:
            raise PersistenceError(f"Failed to persist {key}: {e}") from e

    def _remove(self, key: str) -> None:
        try:
            self._kv.delete(key)
        except StorageError as e:
            raise PersistenceError(f"Failed to delete {key}: {e}") from e

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # Sessions

    def add_session(self, session_id: str, title: str | None = None) -> SessionInfo:
        """Register a session, replacing any existing one with the same id.

        Args:
            session_id: Session identifier
            title: Display title; defaults to "Chat <local date>"

        Returns:
            The stored session
        """
        with self._operation():
            now = self._now_ms()
            if not title:
                title = f"Chat {datetime.fromtimestamp(now / 1000):%m/%d/%Y}"
            session = SessionInfo(id=session_id, title=title, created_at=now, last_active=now)
            self._persist(f"{SESSION_PREFIX}{session_id}", session.to_json_dict())
            self._sessions[session_id] = session
            return session

    def remove_session(self, session_id: str) -> bool:
        with self._operation():
            if session_id not in self._sessions:
                return False
            self._remove(f"{SESSION_PREFIX}{session_id}")
            del self._sessions[session_id]
            return True

    def update_session_activity(self, session_id: str) -> bool:
        """Bump a session's last-active time. Unknown sessions are ignored."""
        with self._operation():
            session = self._sessions.get(session_id)
            if session is None:
                return False
            updated = session.model_copy(update={"last_active": self._now_ms()})
            self._persist(f"{SESSION_PREFIX}{session_id}", updated.to_json_dict())
            self._sessions[session_id] = updated
            return True

    def update_session_title(self, session_id: str, title: str) -> bool:
        with self._operation():
            session = self._sessions.get(session_id)
            if session is None:
                return False
            updated = session.model_copy(update={"title": title})
            self._persist(f"{SESSION_PREFIX}{session_id}", updated.to_json_dict())
            self._sessions[session_id] = updated
            return True

    def list_sessions(self) -> list[SessionInfo]:
        """List sessions, most recently active first."""
        with self._operation():
            return sorted(self._sessions.values(), key=lambda s: s.last_active, reverse=True)

    def clear_all_sessions(self) -> int:
        """Delete every session.

        Returns:
            Number of sessions deleted
        """
        with self._operation():
            count = len(self._sessions)
            if count:
                keys = [f"{SESSION_PREFIX}{sid}" for sid in self._sessions]
                try:
                    self._kv.delete_many(keys)
                except StorageError as e:
                    raise PersistenceError(f"Failed to clear sessions: {e}") from e
                self._sessions.clear()
            return count

    # Brand terms

    def list_brand_terms(self) -> list[BrandTerm]:
        """List brand terms alphabetically by term text."""
        with self._operation():
            return sorted(self._brand_terms.values(), key=lambda t: (t.term.casefold(), t.term))

    def get_brand_term(self, term_id: str) -> BrandTerm | None:
        with self._operation():
            return self._brand_terms.get(term_id)

    def add_brand_term(self, data: BrandTermCreate) -> BrandTerm:
        with self._operation():
            term = BrandTerm(id=str(uuid.uuid4()), **data.model_dump())
            self._persist(f"{BRAND_TERM_PREFIX}{term.id}", term.to_json_dict())
            self._brand_terms[term.id] = term
            return term

    def update_brand_term(self, term_id: str, data: BrandTermUpdate) -> bool:
        """Replace a brand term's fields.

        Args:
            term_id: Brand term identifier
            data: New field values; translations are kept when None

        Returns:
            True if updated, False if not found
        """
        with self._operation():
            existing = self._brand_terms.get(term_id)
            if existing is None:
                return False
            translations = data.translations
            if translations is None:
                translations = existing.translations
            term = BrandTerm(
                id=term_id,
                term=data.term,
                variations=data.variations,
                notes=data.notes,
                translations=dict(translations),
            )
            self._persist(f"{BRAND_TERM_PREFIX}{term_id}", term.to_json_dict())
            self._brand_terms[term_id] = term
            return True

    def delete_brand_term(self, term_id: str) -> bool:
        with self._operation():
            if term_id not in self._brand_terms:
                return False
            self._remove(f"{BRAND_TERM_PREFIX}{term_id}")
            del self._brand_terms[term_id]
            return True

    def update_brand_term_translations(self, term_id: str, translations: dict[str, str]) -> bool:
        """Replace a brand term's translation mapping.

        Locales missing from ``translations`` end up absent; nothing is filled in.

        Returns:
            True if updated, False if not found
        """
        with self._operation():
            existing = self._brand_terms.get(term_id)
            if existing is None:
                return False
            term = existing.model_copy(update={"translations": dict(translations)})
            self._persist(f"{BRAND_TERM_PREFIX}{term_id}", term.to_json_dict())
            self._brand_terms[term_id] = term
            return True

    # History

    def list_history(self) -> list[HistoryItem]:
        """List history items, newest date first."""
        with self._operation():
            return sorted(self._history.values(), key=lambda h: h.date, reverse=True)

    def add_history_item(self, data: HistoryItemCreate) -> HistoryItem:
        """Append a history item stamped with today's UTC date."""
        with self._operation():
            today = datetime.fromtimestamp(self._clock(), tz=timezone.utc).date()
            item = HistoryItem(
                id=str(uuid.uuid4()),
                source_text=data.source_text,
                languages=list(data.languages or []),
                status=data.status,
                word_count=data.word_count,
                date=today.isoformat(),
            )
            self._persist(f"{HISTORY_PREFIX}{item.id}", item.to_json_dict())
            self._history[item.id] = item
            return item
