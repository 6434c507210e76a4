"""Exceptions for the parsing module."""

from arch_decisions.exceptions import ArchDecisionsError

__all__ = ["SourceParseError"]


class SourceParseError(ArchDecisionsError):
    """Raised when a source file cannot be parsed into a SourceUnit.

    Only raised to callers under the ``fail`` parse-error policy; otherwise
    the file is skipped and reported as a diagnostic.
    """

    def __init__(self, message: str, path: str | None = None, line: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.line = line
