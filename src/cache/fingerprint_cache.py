# src/cache/fingerprint_cache.py - v1
"""Content-addressed cache of quiz suggestions.

Equivalent answers (same multiset, or same key/value map) map to the same
fingerprint; generation runs at most once per (fingerprint, kind) in the
normal case. A miss never returns an empty success.
"""

from __future__ import annotations

import logging
from typing import Any

from pathwise.cache.fingerprint import (
    AnswerSet,
    KeyedAnswers,
    answers_for_generation,
    as_answer_set,
    fingerprint,
)
from pathwise.cache.inflight import InflightRegistry
from pathwise.cache.models import CachedResult, CacheResolution
from pathwise.core.errors import GenerationFailure, PathwiseError, PersistenceFailure
from pathwise.core.models import CareerSuggestion, QuizKind, QuizVariant
from pathwise.generation.base_generator import BaseQuizGenerator
from pathwise.store.base_store import BaseContentStore

logger = logging.getLogger(__name__)

_VARIANTS: dict[str, QuizVariant] = {"quick": "standard", "long": "long"}


def normalize_quiz_kind(value: Any) -> QuizKind:
    """'long' selects the long quiz; anything else is the quick quiz."""
    return "long" if value == "long" else "quick"


class FingerprintCache:
    """Resolves quiz answers to suggestions via store lookup or generation."""

    def __init__(
        self,
        store: BaseContentStore,
        generator: BaseQuizGenerator,
        inflight: InflightRegistry | None = None,
    ) -> None:
        self._store = store
        self._generator = generator
        self._inflight = inflight or InflightRegistry()

    async def resolve(self, answers: Any, kind: QuizKind) -> CacheResolution:
        """Return cached suggestions for answers, generating them on a miss.

        Raises:
            InvalidAnswers: If answers are neither a sequence nor a mapping.
            GenerationFailure: On a miss when generation fails or is empty.
        """
        answer_set = as_answer_set(answers)
        fp = fingerprint(answer_set)

        hit = await self._store.find_cached_result(fp, kind)
        if hit is not None:
            logger.debug("Cache hit for %s quiz %s", kind, fp)
            return CacheResolution(fingerprint=fp, kind=kind, suggestions=hit.payload, cached=True)

        async with self._inflight.lease(f"{kind}:{fp}") as waited:
            if waited:
                hit = await self._store.find_cached_result(fp, kind)
                if hit is not None:
                    return CacheResolution(
                        fingerprint=fp, kind=kind, suggestions=hit.payload, cached=True
                    )

            suggestions = await self._generate(answer_set, kind)
            record = CachedResult(
                fingerprint=fp,
                result_kind=kind,
                answers=_raw_answers(answer_set),
                payload=suggestions,
            )
            try:
                await self._store.create_cached_result(record)
            except PersistenceFailure as e:
                logger.warning("Could not cache %s quiz result %s: %s", kind, fp, e)

        logger.info("Generated %d suggestions for %s quiz %s", len(suggestions), kind, fp)
        return CacheResolution(fingerprint=fp, kind=kind, suggestions=suggestions, cached=False)

    async def lookup(self, fp: str, kind: QuizKind | None = None) -> CachedResult | None:
        """Fetch a stored result by fingerprint without generating."""
        return await self._store.find_cached_result(fp, kind)

    async def _generate(self, answer_set: AnswerSet, kind: QuizKind) -> list[CareerSuggestion]:
        variant = _VARIANTS[kind]
        try:
            suggestions = await self._generator.generate_quiz_suggestions(
                answers_for_generation(answer_set), variant
            )
        except PathwiseError:
            raise
        except Exception as e:
            raise GenerationFailure(f"{kind} quiz", str(e)) from e
        if not suggestions:
            raise GenerationFailure(f"{kind} quiz", "no suggestions returned")
        return list(suggestions)


def _raw_answers(answer_set: AnswerSet) -> list[Any] | dict[str, Any]:
    if isinstance(answer_set, KeyedAnswers):
        return dict(answer_set.values)
    return list(answer_set.values)
