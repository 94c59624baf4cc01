# src/core/errors.py - v1
"""Error taxonomy shared by the resolution components.

InvalidIdentity, InvalidAnswers and GenerationFailure surface to callers.
PersistenceFailure is raised by stores; best-effort callers log and continue.
NotFound is a valid outcome and is only raised where a value is mandatory.
"""

from __future__ import annotations


class PathwiseError(Exception):
    """Base class for all pathwise errors."""


class InvalidIdentity(PathwiseError):
    """A name produced an empty or unusable slug."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot derive an identifier from {name!r}")


class InvalidAnswers(PathwiseError):
    """Quiz answers are neither a sequence nor a mapping."""


class GenerationFailure(PathwiseError):
    """The generation backend failed or returned nothing usable."""

    def __init__(self, subject: str, reason: str) -> None:
        self.subject = subject
        self.reason = reason
        super().__init__(f"Generation failed for {subject!r}: {reason}")


class PersistenceFailure(PathwiseError):
    """The store is unavailable or rejected a write."""


class DuplicateSlugError(PersistenceFailure):
    """An entity with the same (kind, slug) already exists."""

    def __init__(self, kind: str, slug: str) -> None:
        self.kind = kind
        self.slug = slug
        super().__init__(f"{kind} with slug {slug!r} already exists")


class NotFound(PathwiseError):
    """Lookup by slug, id or fingerprint had no match."""

    def __init__(self, what: str, key: str) -> None:
        self.what = what
        self.key = key
        super().__init__(f"{what} not found: {key!r}")
