"""Application configuration and settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"

DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
# Placeholder model names that are remapped to the default.
_UNSUPPORTED_MODELS = {"", "gpt-5.3-codex"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    service_name: str = Field(
        default="spring-break-trip-agent", description="Service name for health checks"
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    # CORS
    ui_origin: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origin for UI",
    )

    # Generation engine
    openai_api_key: str = Field(
        default="dummy-openai-api-key-for-tests",
        description="OpenAI API key for stage generation",
    )
    openai_model: str = Field(
        default=DEFAULT_OPENAI_MODEL, description="OpenAI model for every stage"
    )
    openai_timeout_s: float = Field(
        default=120.0, description="Client timeout for a single generation call"
    )
    web_search_tool_type: str = Field(
        default="web_search_preview", description="Hosted web search tool type"
    )
    max_tool_rounds: int = Field(
        default=4, description="Max function-call round trips per stage"
    )
    budget_tax_rate: float = Field(
        default=0.1, description="Tax rate applied by the budget calculator tool"
    )

    # Sessions
    session_ttl_seconds: int = Field(
        default=0, description="Planning session TTL in seconds (0 disables expiry)"
    )

    @field_validator("openai_model", mode="after")
    @classmethod
    def _fallback_model(cls, value: str) -> str:
        """Map empty or placeholder model names to the default model."""
        value = value.strip()
        if value in _UNSUPPORTED_MODELS:
            return DEFAULT_OPENAI_MODEL
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class MissingOpenAIKeyError(RuntimeError):
    """Raised when an OpenAI API key is not configured."""


def get_openai_api_key() -> str:
    """Return a validated OpenAI API key or raise a helpful error."""
    api_key = (get_settings().openai_api_key or "").strip()
    if not api_key or api_key.startswith("dummy-"):
        raise MissingOpenAIKeyError(
            "OpenAI API key is not configured. "
            "Set OPENAI_API_KEY in your environment (.env) before planning trips."
        )
    return api_key
