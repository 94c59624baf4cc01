# src/llm/base_client.py - v2
"""Abstract LLM client interface used by the LLM-backed generator."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from pathwise.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion; JSON output when response_format is given."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, openai)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model the client sends requests to."""
