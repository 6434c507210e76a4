"""Exceptions for config module.

This module defines exceptions related to configuration loading,
parsing, and validation errors.
"""

from arch_decisions.exceptions import ArchDecisionsError

__all__ = ["ConfigurationError"]


class ConfigurationError(ArchDecisionsError):
    """Base exception for configuration-related errors.

    Configuration errors are fatal: the run stops before any output is
    written.
    """

    pass
