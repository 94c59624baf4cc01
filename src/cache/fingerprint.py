# src/cache/fingerprint.py - v3
"""Order-insensitive fingerprinting of quiz answers.

Answers arrive either as a sequence (one answer per question, order is
irrelevant) or as a mapping of question id to answer. Each shape has its own
canonicalization rule; fingerprint() unifies them behind one entry point.

The digest is a cache key, not a security boundary.
"""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from pathwise.core.errors import InvalidAnswers

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SequenceAnswers:
    """Answers given as an unordered collection of values."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class KeyedAnswers:
    """Answers keyed by question id."""

    values: Mapping[str, Any]


AnswerSet = Union[SequenceAnswers, KeyedAnswers]


def as_answer_set(raw: Any) -> AnswerSet:
    """Tag raw answers with their shape.

    Raises:
        InvalidAnswers: If raw is neither a sequence nor a mapping.
    """
    if isinstance(raw, (SequenceAnswers, KeyedAnswers)):
        return raw
    if isinstance(raw, Mapping):
        return KeyedAnswers(values=dict(raw))
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return SequenceAnswers(values=tuple(raw))
    raise InvalidAnswers(
        f"Answers must be a list or a mapping, got {type(raw).__name__}"
    )


def canonicalize_answers(answers: Any) -> list[str]:
    """Render answers as canonical tokens.

    Sequence: normalized values, sorted (answer order is discarded).
    Keyed: "key:normalizedValue" entries sorted by key.
    """
    answer_set = as_answer_set(answers)
    if isinstance(answer_set, SequenceAnswers):
        return sorted(_normalize_value(v) for v in answer_set.values)
    return [
        f"{key}:{_normalize_value(answer_set.values[key])}"
        for key in sorted(answer_set.values, key=str)
    ]


def fingerprint(answers: Any) -> str:
    """Compute the stable 32-char hex digest of canonicalized answers."""
    tokens = canonicalize_answers(answers)
    payload = json.dumps(tokens, separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()  # noqa: S324


def answers_for_generation(answers: Any) -> dict[str, str]:
    """Adapt the original (non-canonical) answers to the generator shape.

    Sequences become {"q0": ..., "q1": ...} in their original order.
    """
    answer_set = as_answer_set(answers)
    if isinstance(answer_set, SequenceAnswers):
        return {f"q{i}": _as_text(v) for i, v in enumerate(answer_set.values)}
    return {str(k): _as_text(v) for k, v in answer_set.values.items()}


def _normalize_value(value: Any) -> str:
    """Lowercase and squeeze whitespace for text; compact JSON otherwise."""
    if isinstance(value, str):
        return _WHITESPACE.sub(" ", value).strip().lower()
    return _compact_json(value)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else _compact_json(value)


def _compact_json(value: Any) -> str:
    return json.dumps(
        value, separators=(",", ":"), sort_keys=True, ensure_ascii=False, default=str
    )
