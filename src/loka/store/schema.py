"""Pydantic models for loka records and the payloads that create them."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class HistoryStatus(str, Enum):
    """Review outcome of a translation job."""

    PENDING = "Pending"
    EDITED = "Edited"
    APPROVED = "Approved"


class SessionInfo(_CamelModel):
    """Metadata for one chat conversation with the translation agent."""

    id: str
    title: str
    created_at: int  # epoch milliseconds
    last_active: int  # epoch milliseconds


class BrandTerm(_CamelModel):
    """A canonical brand/product name with approved per-locale translations."""

    id: str
    term: str
    variations: str = ""  # comma-separated
    notes: str = ""
    translations: dict[str, str] = Field(default_factory=dict)


class HistoryItem(_CamelModel):
    """A completed translation job."""

    id: str
    source_text: str
    languages: list[str]
    status: HistoryStatus
    word_count: int = Field(ge=0)
    date: str  # YYYY-MM-DD


class BrandTermCreate(_CamelModel):
    """Payload for a new brand term."""

    term: str = ""
    variations: str = ""
    notes: str = ""
    translations: dict[str, str] = Field(default_factory=dict)


class BrandTermUpdate(_CamelModel):
    """Payload replacing a brand term. Translations are kept when omitted."""

    term: str = ""
    variations: str = ""
    notes: str = ""
    translations: dict[str, str] | None = None


class HistoryItemCreate(_CamelModel):
    """Payload for a new history item. The id and date are assigned by the store."""

    source_text: str = ""
    languages: list[str] | None = None
    status: HistoryStatus = HistoryStatus.PENDING
    word_count: int = Field(default=0, ge=0)


class SessionCreate(_CamelModel):
    """Payload for registering a chat session."""

    title: str | None = None
    session_id: str | None = None
    first_message: str | None = None


class SessionTitleUpdate(_CamelModel):
    title: str | None = None
