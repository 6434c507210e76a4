"""Exceptions for the CLI module.

This module defines exceptions specific to CLI operations.
"""

from arch_decisions.exceptions import ArchDecisionsError

__all__ = [
    "CLIError",
    "OutputPathError",
]


class CLIError(ArchDecisionsError):
    """Base exception for CLI-related errors."""

    pass


class OutputPathError(CLIError):
    """Raised when the resolved output path cannot hold the document."""

    pass
