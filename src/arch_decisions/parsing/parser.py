"""Source parser using tree-sitter.

This module provides the SourceParser class for parsing Python source into
syntax trees. Parsers are cached per thread, so one SourceParser can be
shared by a pool of parsing workers.
"""

import codecs
import threading
from pathlib import Path

import structlog
import tree_sitter

from arch_decisions.parsing.exceptions import SourceParseError
from arch_decisions.parsing.languages import Language, detect_language, get_grammar

__all__ = [
    "ParseResult",
    "SourceParser",
]

logger = structlog.get_logger(__name__)


class ParseResult:
    """Result of parsing a source file.

    Attributes:
        tree: The tree-sitter tree, or None if parsing failed.
        language: The detected language.
        source_bytes: The source code as bytes.
        success: Whether parsing was successful.
        error: Error message if parsing failed.
        error_line: 1-based line of the first syntax error, if any.

    """

    def __init__(
        self,
        tree: tree_sitter.Tree | None,
        language: Language,
        source_bytes: bytes,
        success: bool = True,
        error: str | None = None,
        error_line: int | None = None,
    ) -> None:
        self.tree = tree
        self.language = language
        self.source_bytes = source_bytes
        self.success = success
        self.error = error
        self.error_line = error_line

    @property
    def root_node(self) -> tree_sitter.Node | None:
        """Get the root node of the parse tree."""
        return self.tree.root_node if self.tree else None


class SourceParser:
    """Parser turning source code into syntax trees.

    A file with syntax errors is reported as a failed parse rather than a
    partially recovered tree, so declarations are never read from code
    Python itself would reject.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_parser(self, language: Language) -> tree_sitter.Parser | None:
        """Get or create this thread's parser for the given language."""
        parsers: dict[Language, tree_sitter.Parser | None] = getattr(
            self._local, "parsers", None
        ) or {}
        self._local.parsers = parsers

        if language not in parsers:
            grammar = get_grammar(language)
            parsers[language] = tree_sitter.Parser(grammar) if grammar is not None else None
        return parsers[language]

    def parse(
        self,
        source: str | bytes,
        language: Language | None = None,
        file_path: str | Path | None = None,
    ) -> ParseResult:
        """Parse source code into a syntax tree.

        Args:
            source: Source code as string or bytes.
            language: Language to use for parsing. If None, detected from file_path.
            file_path: Optional file path for language detection and logging.

        Returns:
            ParseResult with the parsed tree, or the reason parsing failed.

        Raises:
            SourceParseError: If the language cannot be determined.

        """
        if language is None:
            if file_path is None:
                raise SourceParseError(
                    "Either language or file_path must be provided for parsing"
                )
            language = detect_language(file_path)

        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        if source_bytes.startswith(codecs.BOM_UTF8):
            source_bytes = source_bytes[len(codecs.BOM_UTF8) :]

        parser = self._get_parser(language)
        if parser is None:
            return ParseResult(
                tree=None,
                language=language,
                source_bytes=source_bytes,
                success=False,
                error=f"No grammar available for {language.value}",
            )

        try:
            source_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            return ParseResult(
                tree=None,
                language=language,
                source_bytes=source_bytes,
                success=False,
                error=f"Source is not valid UTF-8: {e}",
            )

        tree = parser.parse(source_bytes)
        if tree.root_node.has_error:
            error_node = _first_error(tree.root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            logger.debug(
                "parsing_failed",
                file_path=str(file_path) if file_path else None,
                line=line,
            )
            return ParseResult(
                tree=None,
                language=language,
                source_bytes=source_bytes,
                success=False,
                error=f"Syntax error at line {line}" if line else "Syntax error",
                error_line=line,
            )

        return ParseResult(tree=tree, language=language, source_bytes=source_bytes)

    def parse_file(self, file_path: str | Path) -> ParseResult:
        """Parse a source file into a syntax tree.

        Args:
            file_path: Path to the source file.

        Returns:
            ParseResult with the parsed tree and metadata.

        Raises:
            SourceParseError: If the file cannot be read.

        """
        path = Path(file_path)

        try:
            source = path.read_bytes()
        except OSError as e:
            raise SourceParseError(f"Failed to read file {file_path}: {e}", path=str(path)) from e

        return self.parse(source, file_path=path)


def _first_error(node: tree_sitter.Node) -> tree_sitter.Node | None:
    """Find the first ERROR or missing node, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(
            reversed([child for child in current.children if child.has_error or child.is_missing])
        )
    return None
