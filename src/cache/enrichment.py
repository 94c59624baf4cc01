# src/cache/enrichment.py - v2
"""Attach roadmap slugs to career suggestions.

Runs after the cache decision for both hits and misses. Each item is
enriched on its own; a failing item is returned unenriched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pathwise.canonical.slug import slugify
from pathwise.core.models import CareerSuggestion, EnrichedSuggestion

logger = logging.getLogger(__name__)


def enrich_suggestion(suggestion: CareerSuggestion) -> EnrichedSuggestion:
    """Derive roadmap_slug from roadmap_path, falling back to career."""
    fields = dict(suggestion)
    try:
        slug = slugify(suggestion.roadmap_path or suggestion.career) or None
        return EnrichedSuggestion(**fields, roadmap_slug=slug)
    except (TypeError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        logger.warning("Could not enrich suggestion %r: %s", suggestion.career, e)
        return EnrichedSuggestion.model_construct(**fields, roadmap_slug=None)


def enrich_suggestions(suggestions: Iterable[CareerSuggestion]) -> list[EnrichedSuggestion]:
    return [enrich_suggestion(s) for s in suggestions]
