"""Architectural decision records discovered from source code.

Declare decisions by subclassing ArchitecturalDecision or DocumentedDecision,
mark the code they govern with instances of those classes as decorators, and
run ``arch-decisions`` to produce an XML document of every decision and the
places that apply it.
"""

from arch_decisions.declarations import (
    ArchitecturalDecision,
    DocumentedDecision,
    Status,
    derive_identifier,
)

__version__ = "0.1.0"

__all__ = [
    "ArchitecturalDecision",
    "DocumentedDecision",
    "Status",
    "__version__",
    "derive_identifier",
]
