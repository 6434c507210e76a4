"""Exceptions for the document module.

This module defines exceptions related to building and writing the
architectural decisions document.
"""

from arch_decisions.exceptions import ArchDecisionsError

__all__ = [
    "DocumentError",
    "DocumentGenerationError",
    "DocumentWriteError",
]


class DocumentError(ArchDecisionsError):
    """Base exception for document errors."""

    pass


class DocumentGenerationError(DocumentError):
    """Raised when a record cannot be represented in the document."""

    pass


class DocumentWriteError(DocumentError):
    """Raised when the document cannot be written to its destination."""

    pass
