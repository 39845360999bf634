"""Application configuration settings."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "FocusEdu"
    app_version: str = "0.1.0"
    debug: bool = False
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",  # Next.js dev server
        "http://127.0.0.1:3000",
    ]

    # Knowledge base (None = bundled knowledge_base.json)
    knowledge_base_path: Optional[str] = None

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 2000

    # YouTube Data API
    youtube_api_key: Optional[str] = None
    youtube_max_results: int = 10

    # NewsData.io
    newsdata_api_key: Optional[str] = None

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # Observability
    metrics_backend: str = "inmemory"  # "inmemory" | "prometheus"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Warns when external API keys are missing; the matching features degrade
    to empty results instead of failing.
    """
    settings = Settings()

    for name in ("openai_api_key", "youtube_api_key", "newsdata_api_key"):
        if not getattr(settings, name):
            logger.warning(
                "%s is not set. Set %s environment variable to enable it.",
                name,
                name.upper(),
            )

    return settings
