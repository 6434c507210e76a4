"""Diagnostic model for recoverable problems found during a run."""

from arch_decisions.models.base import FrozenSchema
from arch_decisions.models.enums import DiagnosticKind

__all__ = ["Diagnostic"]


class Diagnostic(FrozenSchema):
    """A recoverable problem that did not stop document generation.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
        path: Source path relative to its root, if the problem has one.
        line: 1-based line number, if known.
        subject: Fully-qualified name the problem is about, if any.

    """

    kind: DiagnosticKind
    message: str
    path: str | None = None
    line: int | None = None
    subject: str | None = None

    def format(self) -> str:
        """Render the diagnostic as a single line."""
        location = ""
        if self.path is not None:
            location = self.path if self.line is None else f"{self.path}:{self.line}"
            location = f"{location}: "
        return f"{location}{self.kind.value}: {self.message}"
