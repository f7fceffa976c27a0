"""
Notes Gateway — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development against
    services on localhost. Attributes are grouped by concern.
    """

    # ── Record Service ────────────────────────────────────────────────────
    # What: Base URL of the notes record service (CRUD owner)
    record_service_url: str = Field(
        default="http://localhost:8081",
        description="Base URL of the notes record service",
    )

    # ── Search Service ────────────────────────────────────────────────────
    # What: Base URL of the search index service
    # Unset means this gateway instance has no search capability and the
    # `search` operation answers with an empty result.
    search_service_url: Optional[str] = Field(
        default=None,
        description="Base URL of the search service (unset disables search)",
    )

    # What: Timeout in seconds applied to every backend call
    # Backend calls are never retried; a timeout fails the operation.
    backend_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── Notifications ─────────────────────────────────────────────────────
    # What: Redis instance used as the publish/subscribe transport
    redis_url: str = Field(default="redis://localhost:6379/0")

    # What: One channel per mutation kind
    create_channel: str = Field(default="notes.create")
    update_channel: str = Field(default="notes.update")
    delete_channel: str = Field(default="notes.delete")

    # What: Whether createNote publishes to the create channel
    # Off by default: the create channel exists but nothing subscribes to it yet.
    publish_on_create: bool = Field(default=False)

    # ── Caller Identity ───────────────────────────────────────────────────
    # What: Header set by the authenticating proxy with the caller's email
    identity_header: str = Field(default="X-User-Email")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("search_service_url")
    @classmethod
    def blank_search_url_means_unset(cls, v: Optional[str]) -> Optional[str]:
        """An empty SEARCH_SERVICE_URL disables search just like an absent one."""
        if v is not None and not v.strip():
            return None
        return v

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-caller sliding window rate limit
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=3600, ge=60, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # RECORD_SERVICE_URL and record_service_url both work
    }

    @property
    def search_enabled(self) -> bool:
        return self.search_service_url is not None

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that backend endpoints are configured.
        When:  Called during app startup (lifespan).
        How:   Checks each required field and raises ValueError with guidance.
        """
        errors = []
        if not self.record_service_url.startswith(("http://", "https://")):
            errors.append(
                f"RECORD_SERVICE_URL '{self.record_service_url}' is not an http(s) URL."
            )
        if not self.redis_url.startswith(("redis://", "rediss://", "unix://")):
            errors.append(f"REDIS_URL '{self.redis_url}' is not a Redis URL.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
