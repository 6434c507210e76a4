"""Deterministic traversal of root directories."""

import fnmatch
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from arch_decisions.discovery.exceptions import MissingRootError
from arch_decisions.logging_config import get_logger
from arch_decisions.parsing.languages import Language, detect_language

__all__ = ["SourceWalker", "validate_roots"]

logger = get_logger(__name__)


def validate_roots(roots: Iterable[Path | str]) -> list[Path]:
    """Check that every root is a readable directory.

    Args:
        roots: Root directories, in the order given by the caller.

    Returns:
        The roots as absolute paths, duplicates removed, order kept.

    Raises:
        MissingRootError: For the first root that is missing or unreadable.

    """
    validated: list[Path] = []
    for root in roots:
        path = Path(root).absolute()
        if not path.exists():
            raise MissingRootError(str(root), "does not exist")
        if not path.is_dir():
            raise MissingRootError(str(root), "is not a directory")
        if not os.access(path, os.R_OK | os.X_OK):
            raise MissingRootError(str(root), "is not readable")
        if path not in validated:
            validated.append(path)
    return validated


class SourceWalker:
    """Lists scannable source files under a root in lexicographic path order.

    Attributes:
        exclude_patterns: fnmatch patterns; matching directory names are pruned.

    """

    def __init__(self, exclude_patterns: Iterable[str] = ()) -> None:
        self.exclude_patterns = tuple(exclude_patterns)

    def walk(
        self, root: Path, on_error: Callable[[OSError], None] | None = None
    ) -> list[Path]:
        """Return every source file under ``root``.

        Args:
            root: A validated root directory.
            on_error: Called with the error of each directory that cannot be
                listed. Its files are missing from the result.

        Returns:
            Absolute file paths sorted by their POSIX path relative to root.

        """
        found: list[Path] = []

        def report(error: OSError) -> None:
            logger.warning("directory_unreadable", path=error.filename, error=str(error))
            if on_error is not None:
                on_error(error)

        for directory, dirnames, filenames in os.walk(root, onerror=report):
            dirnames[:] = [d for d in dirnames if not self._excluded(d)]
            for filename in filenames:
                if detect_language(filename) is not Language.unknown:
                    found.append(Path(directory) / filename)

        found.sort(key=lambda p: p.relative_to(root).as_posix())
        logger.debug("root_walked", root=str(root), files=len(found))
        return found

    def _excluded(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude_patterns)
