"""Application configuration and settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///kolkata_explorer.db",
        description="SQLAlchemy database URL (SQLite or PostgreSQL)",
    )

    # CORS
    ui_origin: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origin for UI",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root logging level")

    # JWT Configuration
    jwt_private_key_pem: str = Field(
        default="dummy-private-key-for-tests",
        description="RSA private key for JWT signing (PEM format)",
    )
    jwt_public_key_pem: str = Field(
        default="dummy-public-key-for-tests",
        description="RSA public key for JWT verification (PEM format)",
    )
    jwt_access_ttl_minutes: int = Field(
        default=15, description="Access token lifetime in minutes"
    )
    jwt_refresh_ttl_days: int = Field(
        default=7, description="Refresh token lifetime in days"
    )
    password_min_length: int = Field(
        default=8, description="Minimum accepted password length"
    )

    # Admin back office
    admin_password: str = Field(
        default="admin123", description="Password exchanged for an admin session"
    )
    admin_session_ttl_hours: int = Field(
        default=12, description="Admin session lifetime in hours"
    )

    # LLM (any OpenAI-compatible endpoint)
    openai_api_key: str = Field(
        default="dummy-openai-api-key-for-tests",
        description="API key for itinerary suggestions and the assistant",
    )
    openai_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenAI-compatible completion API",
    )
    openai_model: str = Field(
        default="google/gemini-2.0-flash-001",
        description="Model used for itinerary suggestions",
    )
    openai_chat_model: str = Field(
        default="google/gemini-2.0-flash-001",
        description="Model used for the assistant chat",
    )
    llm_timeout_s: float = Field(
        default=30.0, description="Timeout for completion calls in seconds"
    )

    # Geocoding
    geocode_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim search endpoint",
    )
    geocode_user_agent: str = Field(
        default="KolkataExplorer/1.0",
        description="User-Agent sent to the geocoder (required by Nominatim)",
    )
    http_timeout_s: float = Field(
        default=10.0, description="Timeout for outbound HTTP calls in seconds"
    )

    @field_validator("database_url", mode="after")
    @classmethod
    def _normalize_sqlite_url(cls, value: str) -> str:
        """Ensure sqlite URLs always point to the repo root."""
        sqlite_prefixes = ("sqlite:///", "sqlite+pysqlite:///")
        for prefix in sqlite_prefixes:
            if value.startswith(prefix):
                path = value[len(prefix) :]
                if path and not path.startswith("/") and path != ":memory:":
                    abs_path = (_BASE_DIR / path).resolve()
                    return f"{prefix}{abs_path.as_posix()}"
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class MissingOpenAIKeyError(RuntimeError):
    """Raised when an LLM API key is not configured."""


def get_openai_api_key() -> str:
    """Return a validated LLM API key or raise a helpful error."""
    api_key = (get_settings().openai_api_key or "").strip()
    if not api_key or api_key.startswith("dummy-"):
        raise MissingOpenAIKeyError(
            "LLM API key is not configured. "
            "Set OPENAI_API_KEY in your environment (.env) to enable "
            "itinerary suggestions and the assistant."
        )
    return api_key
