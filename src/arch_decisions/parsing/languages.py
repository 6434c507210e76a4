"""Language detection and grammar loading.

Decisions are declared and applied in Python sources; this module decides
which files are scanned and loads the tree-sitter grammar that parses them.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

import structlog
import tree_sitter
import tree_sitter_python

__all__ = [
    "Language",
    "SOURCE_SUFFIXES",
    "detect_language",
    "get_grammar",
]

logger = structlog.get_logger(__name__)


class Language(str, Enum):
    """Languages the scanner knows about."""

    python = "python"
    unknown = "unknown"


# Stub files (.pyi) are not scanned: they would redeclare every decision.
SOURCE_SUFFIXES: dict[str, Language] = {
    ".py": Language.python,
}


def detect_language(file_path: str | Path) -> Language:
    """Detect the language of a file from its extension.

    Args:
        file_path: Path to the file.

    Returns:
        Detected Language, or Language.unknown if not scanned.

    """
    return SOURCE_SUFFIXES.get(Path(file_path).suffix.lower(), Language.unknown)


@lru_cache(maxsize=None)
def get_grammar(language: Language) -> tree_sitter.Language | None:
    """Load the tree-sitter grammar for a language.

    Args:
        language: The language to load the grammar for.

    Returns:
        The tree-sitter Language object, or None if the language is not scanned.

    """
    if language != Language.python:
        logger.debug("grammar_not_available", language=language.value)
        return None
    return tree_sitter.Language(tree_sitter_python.language())
