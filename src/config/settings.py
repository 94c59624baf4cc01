# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Persistent store ===
    store_backend: Literal["memory", "json", "sqlite", "redis"] = "json"
    store_root: Path = Path("~/.pathwise/store")
    store_redis_url: str = ""

    # === Generation (LLM) ===
    llm_provider: str = "google"
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.4
    llm_max_tokens: int = 8192

    # Provider API keys
    google_api_key: str = ""
    openai_api_key: str = ""

    # === Quiz ===
    quiz_generator: Literal["patterns", "llm"] = "patterns"
    quiz_mappings_path: Path = Path("data/quiz-mappings.json")
    quiz_min_similarity: float = 0.6

    # === Resolution ===
    category_scan_limit: int = 1000
    fallback_category: str = "Community Generated"
    fallback_icon: str = "Globe"
    refresh_stale_content: bool = True
    inflight_lease_timeout_s: float = 30.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("quiz_min_similarity")
    @classmethod
    def validate_similarity(cls, v: float) -> float:  # noqa: N805
        if not 0.0 <= v <= 1.0:
            raise ValueError("quiz_min_similarity must be within [0, 1]")
        return v

    @field_validator("inflight_lease_timeout_s", "category_scan_limit")
    @classmethod
    def validate_positive(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.store_backend == "redis" and not self.store_redis_url:
            errors.append("STORE_BACKEND=redis requires STORE_REDIS_URL")

        if not self.fallback_category.strip():
            errors.append("FALLBACK_CATEGORY must not be empty")

        if not 0.0 <= self.llm_temperature <= 2.0:
            errors.append("LLM_TEMPERATURE must be within [0, 2]")

        if self.quiz_generator == "llm" and self.llm_provider not in ("google", "openai"):
            errors.append(
                f"QUIZ_GENERATOR=llm requires a supported LLM_PROVIDER, got {self.llm_provider!r}"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def llm_api_key(self) -> str:
        """API key matching the configured provider."""
        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
        }.get(self.llm_provider, "")


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
