"""Pydantic models for loka.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field

from loka.translation.languages import AVAILABLE_LANGUAGES


class ServerConfig(BaseModel):
    """API server configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=8787, description="Server port", ge=1, le=65535)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins (use ['*'] for development only)",
    )


class StorageConfig(BaseModel):
    """Durable key-value storage configuration."""

    path: str = Field(
        default="~/.loka/loka.db",
        description="Path to SQLite database holding every tenant's records",
    )
    default_tenant: str = Field(
        default="default",
        description="Tenant used when a request carries no X-Tenant-ID header",
        min_length=1,
    )


class AgentConfig(BaseModel):
    """External chat agent configuration."""

    base_url: str = Field(
        default="http://localhost:8788",
        description="Base URL of the chat agent backend",
    )
    timeout: float = Field(default=60.0, description="Request timeout in seconds", gt=0)


class TranslatorConfig(BaseModel):
    """Translator defaults shown to the reviewer."""

    default_languages: list[str] = Field(
        default_factory=lambda: [lang.id for lang in AVAILABLE_LANGUAGES[:2]],
        description="Locales preselected for new translations",
    )
    theme: Literal["light", "dark", "system"] = Field(default="system", description="UI theme")

    def toggle_language(self, lang_id: str) -> list[str]:
        """Add or remove a locale from the default selection.

        Args:
            lang_id: Locale code to toggle

        Returns:
            The updated default language list
        """
        if lang_id in self.default_languages:
            self.default_languages = [lid for lid in self.default_languages if lid != lang_id]
        else:
            self.default_languages = [*self.default_languages, lang_id]
        return self.default_languages


class LokaConfig(BaseModel):
    """Root configuration schema for Loka."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    translator: TranslatorConfig = Field(default_factory=TranslatorConfig)
