"""Discovery of decision declarations and their usages.

This package provides the two passes over parsed sources:
- DeclarationGatherer: finds classes satisfying the decision contract
- UsageLocator: finds the decorators that apply those decisions
- SymbolTable: the name index both passes resolve through
"""

from arch_decisions.discovery.exceptions import (
    DuplicateIdentifierError,
    MissingRootError,
    UnconstructibleDeclarationError,
    UnresolvedReferenceError,
)
from arch_decisions.discovery.gatherer import DeclarationGatherer, GatherResult
from arch_decisions.discovery.locator import LocateResult, UsageLocator
from arch_decisions.discovery.symbols import Lineage, SymbolTable
from arch_decisions.discovery.walker import SourceWalker, validate_roots

__all__ = [
    "DeclarationGatherer",
    "DuplicateIdentifierError",
    "GatherResult",
    "Lineage",
    "LocateResult",
    "MissingRootError",
    "SourceWalker",
    "SymbolTable",
    "UnconstructibleDeclarationError",
    "UnresolvedReferenceError",
    "UsageLocator",
    "validate_roots",
]
