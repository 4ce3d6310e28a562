"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analysis settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables (prefixed with BDLAW_)
    2. .env file (for local development)
    3. Default values

    Pattern and keyword tables are not configured here; they are passed to
    the detectors directly (see bdlaw.legal_parser.patterns).
    """

    model_config = SettingsConfigDict(
        env_prefix="BDLAW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Root log level used by the CLI",
    )

    # =========================================================================
    # Citation extraction
    # =========================================================================
    citation_context_chars: int = Field(
        default=50,
        ge=0,
        description="Characters of context captured before and after a citation",
    )
    negation_window_chars: int = Field(
        default=20,
        ge=0,
        description="Characters searched either side of a citation for negation cues",
    )

    # =========================================================================
    # Marker detection
    # =========================================================================
    amendment_context_chars: int = Field(
        default=20,
        ge=0,
        description="Characters of line context kept around amendment markers",
    )

    # =========================================================================
    # Span accounting
    # =========================================================================
    min_unclaimed_span_length: int = Field(
        default=10,
        ge=1,
        description="Shortest unclaimed gap reported by SpanAccountant",
    )


settings = Settings()
