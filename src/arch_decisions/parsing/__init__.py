"""Source parsing for arch-decisions.

This package turns Python files into SourceUnits using tree-sitter:
- SourceParser: parses source files into syntax trees
- SourceUnitExtractor: reads declarations, imports and decorators from a tree
- Language detection and grammar loading utilities
"""

from arch_decisions.parsing.exceptions import SourceParseError
from arch_decisions.parsing.extractor import SourceUnitExtractor, module_name_for
from arch_decisions.parsing.languages import (
    SOURCE_SUFFIXES,
    Language,
    detect_language,
    get_grammar,
)
from arch_decisions.parsing.parser import ParseResult, SourceParser

__all__ = [
    "detect_language",
    "get_grammar",
    "Language",
    "module_name_for",
    "ParseResult",
    "SOURCE_SUFFIXES",
    "SourceParseError",
    "SourceParser",
    "SourceUnitExtractor",
]
