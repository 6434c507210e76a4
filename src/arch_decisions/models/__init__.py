"""Models for arch-decisions.

This package provides the pydantic models shared by discovery and document
generation:
- DecisionRecord, UsageSite, MetaEntry, SourceLocation: the document content
- SourceUnit, DeclaredType, AnnotationSite, ParsedFile: the parsed source model
- Diagnostic: recoverable problems collected during a run
- Policy and kind enumerations
"""

from arch_decisions.models.base import BaseSchema, FrozenSchema
from arch_decisions.models.decision import (
    DecisionRecord,
    MetaEntry,
    SourceLocation,
    UsageSite,
)
from arch_decisions.models.diagnostic import Diagnostic
from arch_decisions.models.enums import (
    ConstructionPolicy,
    DiagnosticKind,
    ParseErrorPolicy,
    ReferencePolicy,
    ScopeKind,
)
from arch_decisions.models.source_unit import (
    AnnotationSite,
    DeclaredType,
    ParsedFile,
    SourceUnit,
)

__all__ = [
    "AnnotationSite",
    "BaseSchema",
    "ConstructionPolicy",
    "DecisionRecord",
    "DeclaredType",
    "Diagnostic",
    "DiagnosticKind",
    "FrozenSchema",
    "MetaEntry",
    "ParseErrorPolicy",
    "ParsedFile",
    "ReferencePolicy",
    "ScopeKind",
    "SourceLocation",
    "SourceUnit",
    "UsageSite",
]
