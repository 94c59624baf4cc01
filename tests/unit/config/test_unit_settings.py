# tests/unit/config/test_unit_settings.py - v1
"""Tests for config/settings.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pathwise.config.settings import ConfigurationError, Settings, load_settings


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.store_backend == "json"
        assert s.quiz_generator == "patterns"
        assert s.fallback_category == "Community Generated"
        assert s.refresh_stale_content is True
        assert s.quiz_mappings_path == Path("data/quiz-mappings.json")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "sqlite")
        monkeypatch.setenv("FALLBACK_CATEGORY", "Other Paths")
        s = Settings(_env_file=None)
        assert s.store_backend == "sqlite"
        assert s.fallback_category == "Other Paths"

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        env = tmp_path / ".env"
        env.write_text("LLM_PROVIDER=openai\nOPENAI_API_KEY=sk-test\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.llm_provider == "openai"
        assert s.llm_api_key == "sk-test"

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, store_backend="mongo")

    def test_similarity_range(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, quiz_min_similarity=1.5)

    def test_positive_lease_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, inflight_lease_timeout_s=0)

    def test_redis_requires_url(self):
        with pytest.raises(ConfigurationError, match="STORE_REDIS_URL"):
            Settings(_env_file=None, store_backend="redis", store_redis_url="")

    def test_blank_fallback_rejected(self):
        with pytest.raises(ConfigurationError, match="FALLBACK_CATEGORY"):
            Settings(_env_file=None, fallback_category="  ")

    def test_errors_are_combined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, llm_temperature=3.0, quiz_generator="llm", llm_provider="other")
        message = str(exc_info.value)
        assert "LLM_TEMPERATURE" in message
        assert "QUIZ_GENERATOR=llm" in message

    def test_unknown_provider_key_is_empty(self):
        assert Settings(_env_file=None, llm_provider="other").llm_api_key == ""

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, store_backend="memory")
        assert s.store_backend == "memory"
