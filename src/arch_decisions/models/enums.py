"""Enumeration types for arch-decisions.

This module defines the policy switches used by discovery and the kinds of
diagnostics and usage scopes reported in results.
"""

from enum import Enum

__all__ = [
    "ConstructionPolicy",
    "DiagnosticKind",
    "ParseErrorPolicy",
    "ReferencePolicy",
    "ScopeKind",
]


class ConstructionPolicy(str, Enum):
    """What to do with a declaration that needs constructor arguments.

    Attributes:
        skip: Leave it out of the document and report a diagnostic.
        fail: Abort the run with a configuration error.
    """

    skip = "skip"
    fail = "fail"


class ParseErrorPolicy(str, Enum):
    """What to do with a source file that cannot be parsed.

    Attributes:
        skip: Ignore the file and report a diagnostic.
        fail: Abort the run.
    """

    skip = "skip"
    fail = "fail"


class ReferencePolicy(str, Enum):
    """What to do with a usage that names no gathered decision.

    Attributes:
        ignore: Drop it silently.
        log: Drop it and report a diagnostic.
        fail: Abort the run.
    """

    ignore = "ignore"
    log = "log"
    fail = "fail"


class DiagnosticKind(str, Enum):
    """Kinds of recoverable problems collected during a run."""

    unconstructible = "unconstructible"
    parse_error = "parse_error"
    unresolved_reference = "unresolved_reference"
    incomplete_declaration = "incomplete_declaration"


class ScopeKind(str, Enum):
    """Kind of code scope a decision is applied to."""

    class_ = "class"
    function = "function"
