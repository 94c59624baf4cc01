# src/cache/models.py - v2
"""Cache domain models: CachedResult, CacheResolution.

A CachedResult is created once per distinct (fingerprint, result_kind) and
never mutated afterwards.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from pathwise.core.models import CareerSuggestion, QuizKind, new_id, utc_now


class CachedResult(BaseModel):
    """Stored quiz suggestions keyed by answer fingerprint and quiz kind."""

    id: str = Field(default_factory=new_id)
    fingerprint: str
    result_kind: QuizKind
    answers: list[Any] | dict[str, Any] = Field(default_factory=list)
    payload: list[CareerSuggestion]
    created_at: datetime = Field(default_factory=utc_now)


class CacheResolution(BaseModel):
    """Outcome of FingerprintCache.resolve()."""

    fingerprint: str
    kind: QuizKind
    suggestions: list[CareerSuggestion]
    cached: bool
