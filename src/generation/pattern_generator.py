# src/generation/pattern_generator.py - v1
"""Local quiz suggestions from a curated pattern mappings file.

A pattern is a partial answer map. Similarity is the fraction of the
pattern's keys whose answer matches exactly. The best pattern scoring at
least min_similarity supplies the suggestions; otherwise the variant's
fallback list is used. No network calls.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from pathwise.core.models import CareerSuggestion, QuizVariant
from pathwise.generation.base_generator import BaseQuizGenerator

logger = logging.getLogger(__name__)


class QuizPattern(BaseModel):
    id: str
    pattern: dict[str, str]
    suggestions: list[CareerSuggestion] = Field(default_factory=list)


class VariantMappings(BaseModel):
    patterns: list[QuizPattern] = Field(default_factory=list)
    fallback: list[CareerSuggestion] = Field(default_factory=list)


class QuizMappings(BaseModel):
    """Contents of quiz-mappings.json."""

    standard: VariantMappings = Field(default_factory=VariantMappings)
    long: VariantMappings = Field(default_factory=VariantMappings)

    def for_variant(self, variant: QuizVariant) -> VariantMappings:
        return self.long if variant == "long" else self.standard


def pattern_similarity(answers: dict[str, str], pattern: dict[str, str]) -> float:
    """Fraction of pattern keys answered with exactly the pattern's value."""
    if not pattern:
        return 0.0
    matches = sum(1 for key, value in pattern.items() if answers.get(key) and answers[key] == value)
    return matches / len(pattern)


class PatternQuizGenerator(BaseQuizGenerator):
    """Quiz generator backed by QuizMappings."""

    def __init__(self, mappings: QuizMappings | None, min_similarity: float = 0.6) -> None:
        self._mappings = mappings
        self._min_similarity = min_similarity

    @classmethod
    def from_file(cls, path: Path | str, min_similarity: float = 0.6) -> PatternQuizGenerator:
        """Load mappings from JSON; a missing or invalid file yields no mappings."""
        return cls(load_mappings(path), min_similarity=min_similarity)

    @property
    def loaded(self) -> bool:
        return self._mappings is not None

    def best_pattern(
        self, answers: dict[str, str], variant: QuizVariant
    ) -> tuple[QuizPattern | None, float]:
        """Highest-scoring pattern (first wins on ties) and its score."""
        best: QuizPattern | None = None
        best_score = 0.0
        if self._mappings is None:
            return None, 0.0
        for candidate in self._mappings.for_variant(variant).patterns:
            score = pattern_similarity(answers, candidate.pattern)
            if score > best_score:
                best, best_score = candidate, score
        return best, best_score

    async def generate_quiz_suggestions(
        self, answers: dict[str, str], variant: QuizVariant
    ) -> list[CareerSuggestion]:
        if self._mappings is None:
            logger.error("Quiz mappings not loaded, no suggestions available")
            return []

        best, score = self.best_pattern(answers, variant)
        if best is not None and score >= self._min_similarity:
            logger.info("Pattern %s matched with %.0f%% similarity", best.id, score * 100)
            return [s.model_copy() for s in best.suggestions]

        logger.info("No pattern match for %s quiz (best %.0f%%), using fallback", variant, score * 100)
        return [s.model_copy() for s in self._mappings.for_variant(variant).fallback]


def load_mappings(path: Path | str) -> QuizMappings | None:
    """Read and validate a mappings file, logging instead of raising."""
    path = Path(path).expanduser()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        mappings = QuizMappings.model_validate(data)
    except FileNotFoundError:
        logger.error("Quiz mappings file not found: %s", path)
        return None
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("Failed to load quiz mappings from %s: %s", path, e)
        return None
    logger.info(
        "Loaded quiz mappings: %d standard, %d long patterns",
        len(mappings.standard.patterns), len(mappings.long.patterns),
    )
    return mappings
