"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


def find_env_file() -> Optional[Path]:
    """Find .env file in multiple possible locations."""
    current_dir = os.path.dirname(os.path.abspath(__file__))

    possible_paths = [
        os.path.join(current_dir, ".env"),
        os.path.join(os.path.dirname(current_dir), ".env"),
        os.path.join(os.path.dirname(os.path.dirname(current_dir)), ".env"),
    ]

    for path_str in possible_paths:
        if os.path.exists(path_str):
            path = Path(path_str)
            LOGGER.info(f"Found .env file at: {path}")
            return path

    LOGGER.debug("No .env file found in expected locations")
    return None


ENV_FILE = find_env_file()


class LLMSettings(BaseSettings):
    """Text-generation provider settings."""

    provider: str = Field(default="gemini", validation_alias="LLM_PROVIDER")

    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")

    openrouter_api_key: str = Field(default="", validation_alias="OPENROUTER_API_KEY")
    openrouter_api_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_API_URL")
    openrouter_model: str = Field(default="google/gemini-2.0-flash-001", validation_alias="OPENROUTER_MODEL")

    enable_fallback: bool = Field(default=False, validation_alias="ENABLE_LLM_FALLBACK")

    timeout_seconds: int = Field(default=90, validation_alias="LLM_TIMEOUT_SECONDS")
    # One attempt per extraction operation per request
    max_retries: int = Field(default=1, ge=1, validation_alias="LLM_MAX_RETRIES")
    temperature: float = Field(default=0.2, validation_alias="LLM_TEMPERATURE")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",  # No prefix for nested settings
    )

    def model_post_init(self, __context) -> None:
        """Log settings after initialization."""
        LOGGER.info(f"LLM Provider: {self.provider}")
        if self.provider == "gemini":
            LOGGER.info(f"Gemini API Key present: {bool(self.gemini_api_key)}")
        elif self.provider == "openrouter":
            LOGGER.info(f"OpenRouter API Key present: {bool(self.openrouter_api_key)}")
        else:
            LOGGER.warning(f"Using unsupported LLM provider: {self.provider}")


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    # Application Settings
    app_name: str = Field(default="Insightful Reader", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=True, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:9002"],
        validation_alias="CORS_ORIGINS"
    )

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")

    # Upload Settings
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES")

    llm: LLMSettings = Field(default_factory=lambda: LLMSettings())

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def llm_provider(self) -> str:
        return self.llm.provider

    @property
    def gemini_api_key(self) -> str:
        return self.llm.gemini_api_key

    @property
    def gemini_model(self) -> str:
        return self.llm.gemini_model

    @property
    def openrouter_api_key(self) -> str:
        return self.llm.openrouter_api_key

    @property
    def openrouter_api_url(self) -> str:
        return self.llm.openrouter_api_url

    @property
    def openrouter_model(self) -> str:
        return self.llm.openrouter_model

    @property
    def enable_llm_fallback(self) -> bool:
        return self.llm.enable_fallback


settings = Settings()

# Re-level this module's logger now that LOG_LEVEL is loaded
get_logger(__name__, level=settings.log_level)

LOGGER.info(f"Settings initialized with environment: {settings.environment}")
