"""Base exceptions for arch-decisions.

This module defines the root exception hierarchy for the package. All
domain-specific exceptions inherit from ArchDecisionsError so callers can
tell "something is broken" apart from "nothing to report".
"""

__all__ = ["ArchDecisionsError"]


class ArchDecisionsError(Exception):
    """Base exception for all arch-decisions errors."""

    pass
