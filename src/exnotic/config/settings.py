"""
Application settings and configuration management.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_INVIDIOUS_INSTANCES = [
    "https://inv.vern.cc",
    "https://invidious.lunar.icu",
    "https://vid.puffyan.us",
    "https://invidious.privacydev.net",
    "https://inv.odyssey346.dev",
    "https://invidious.slipfox.xyz",
    "https://invidious.weblibre.org",
    "https://iv.ggtyler.dev",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Exnotic API")
    debug: bool = Field(default=False)  # FastAPI debug tracebacks
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    # Upstreams
    user_agent: str = Field(default=DEFAULT_BROWSER_USER_AGENT)
    invidious_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; ExnoticApp/1.0)"
    )
    invidious_instances: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_INVIDIOUS_INSTANCES)
    )
    request_timeout: float = Field(default=30.0)

    # Ephemeral store
    cache_max_entries: int = Field(default=1000)
    cache_ttl_seconds: int = Field(default=3600)
    search_log_max_entries: int = Field(default=1000)
    recent_searches_limit: int = Field(default=10)

    # Result limits
    channel_video_limit: int = Field(default=200)
    search_result_limit: int = Field(default=50)

    @field_validator("invidious_instances", mode="before")
    @classmethod
    def parse_invidious_instances(cls, v: str | list[str]) -> list[str]:
        """Parse instance URLs from a comma-separated string or list."""
        if isinstance(v, str):
            v = v.split(",")
        return [url.strip().rstrip("/") for url in v if url and url.strip()]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator(
        "request_timeout",
        "cache_max_entries",
        "cache_ttl_seconds",
        "search_log_max_entries",
        "recent_searches_limit",
        "channel_video_limit",
        "search_result_limit",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Reject zero or negative limits."""
        if v <= 0:
            raise ValueError(f"Value must be greater than 0, got {v}")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
