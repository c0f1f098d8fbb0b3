#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import UnknownProviderError

from .constants import (
    API_RATE_LIMIT,
    CONVERT_RATE_LIMIT,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    LOG_LEVEL,
    MAX_FILE_SIZE_MB,
    MODEL_MAX_TOKENS,
    MODEL_TEMPERATURE,
    MODEL_TIMEOUT_SECONDS,
    SESSION_TIMEOUT_MINUTES,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields from .env that aren't defined in model
    )

    # ========== API Keys ==========
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("google_api_key", "gemini_api_key", "api_key"),
    )
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # ========== Provider & Model ==========
    provider: str = DEFAULT_PROVIDER  # gemini | claude | openai
    model: Optional[str] = DEFAULT_MODEL
    temperature: float = MODEL_TEMPERATURE
    max_tokens: int = MODEL_MAX_TOKENS
    request_timeout: int = MODEL_TIMEOUT_SECONDS
    base_url: Optional[str] = None

    # ========== Output ==========
    # Remove one ``` fence pair wrapping the whole reply
    strip_code_fences: bool = True

    # ========== File Upload & Rate Limiting ==========
    max_upload_size_mb: int = MAX_FILE_SIZE_MB
    rate_limit: str = API_RATE_LIMIT
    convert_rate_limit: str = CONVERT_RATE_LIMIT

    # ========== Server ==========
    allowed_origins: List[str] = [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
    ]
    session_timeout_minutes: int = SESSION_TIMEOUT_MINUTES

    # ========== Directories ==========
    output_dir: Path = BASE_DIR / "data" / "output"
    logs_dir: Path = BASE_DIR / "data" / "logs"

    # ========== Logging ==========
    log_level: str = LOG_LEVEL
    log_to_file: bool = True
    log_json: bool = False

    def ensure_directories(self) -> None:
        """Create output and log directories"""
        for dir_path in [self.output_dir, self.logs_dir]:
            dir_path.mkdir(exist_ok=True, parents=True)

    def get_api_key(self, provider: Optional[str] = None) -> str:
        """Get API key for the given (or configured) provider; empty if unset"""
        name = (provider or self.provider).lower()
        if name in ("gemini", "google"):
            return self.google_api_key
        elif name in ("claude", "anthropic"):
            return self.anthropic_api_key
        elif name in ("openai", "gpt"):
            return self.openai_api_key
        else:
            raise UnknownProviderError(f"Unsupported provider: {name}")

    def summary(self) -> dict:
        """Non-secret configuration summary"""
        return {
            "provider": self.provider,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "strip_code_fences": self.strip_code_fences,
            "max_upload_size_mb": self.max_upload_size_mb,
            "api_key_configured": bool(self.get_api_key()),
        }


# Global settings instance
settings = Settings()
