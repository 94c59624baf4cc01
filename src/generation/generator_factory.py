# src/generation/generator_factory.py - v1
"""Factory: build generators from Settings."""

from __future__ import annotations

import logging

from pathwise.config.settings import Settings
from pathwise.generation.base_generator import BaseQuizGenerator, BaseRoadmapGenerator
from pathwise.generation.llm_generator import LLMGenerator
from pathwise.generation.pattern_generator import PatternQuizGenerator
from pathwise.llm.base_client import BaseLLMClient
from pathwise.llm.client_factory import create_llm_client

logger = logging.getLogger(__name__)


def create_llm_generator(
    settings: Settings, client: BaseLLMClient | None = None
) -> LLMGenerator:
    """LLM generator for the configured provider and model."""
    if client is None:
        client = create_llm_client(settings.llm_provider, settings.llm_model, settings)
    return LLMGenerator(
        client,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


def create_roadmap_generator(
    settings: Settings, client: BaseLLMClient | None = None
) -> BaseRoadmapGenerator:
    return create_llm_generator(settings, client)


def create_quiz_generator(
    settings: Settings, client: BaseLLMClient | None = None
) -> BaseQuizGenerator:
    """Pattern-based generator by default; LLM when QUIZ_GENERATOR=llm."""
    if settings.quiz_generator == "llm":
        return create_llm_generator(settings, client)
    logger.debug("Using pattern quiz generator from %s", settings.quiz_mappings_path)
    return PatternQuizGenerator.from_file(
        settings.quiz_mappings_path, min_similarity=settings.quiz_min_similarity
    )
