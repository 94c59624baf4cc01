# src/logging/context.py - v2
"""Contextual logging support: attach request_id, operation, subject to log records."""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_subject: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "subject", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    operation: str | None = None
    subject: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        operation=_operation.get(),
        subject=_subject.get(),
    )


def set_request_context(request_id: str | None = None) -> str:
    """Set the request id (generated if omitted) and return it."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def set_operation_context(operation: str, subject: str | None = None) -> None:
    """Set operation-level context (called per public engine operation)."""
    _operation.set(operation)
    _subject.set(subject)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _operation.set(None)
    _subject.set(None)
