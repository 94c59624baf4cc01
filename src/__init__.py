# src/__init__.py - v1
"""Pathwise: content identity and resolution engine for career guidance.

Entry points live in pathwise.api.facade (ContentEngine) and pathwise.main (CLI).
"""

from pathwise.version import __version__

__all__ = ["__version__"]
