# src/canonical/slug.py - v1
"""Slug derivation for human-readable names.

slugify() is pure and total: same name modulo case, whitespace, punctuation
and diacritics always yields the same slug. Inputs without any alphanumeric
character yield "" and callers must treat that as invalid.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: object) -> str:
    """Return the canonical slug for a display name.

    Examples:
        "UX / UI Designer" -> "ux-ui-designer"
        "  Multiple   Spaces!! " -> "multiple-spaces"
    """
    if text is None:
        return ""
    value = text if isinstance(text, str) else str(text)
    decomposed = unicodedata.normalize("NFKD", value)
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM.sub("-", ascii_only.lower()).strip("-")


def is_valid_slug(slug: str) -> bool:
    """True when slug is non-empty and already canonical."""
    return bool(slug) and slugify(slug) == slug
