"""Atomic file output."""

import os
import stat
import tempfile
from pathlib import Path

from arch_decisions.document.exceptions import DocumentWriteError
from arch_decisions.logging_config import get_logger

__all__ = ["write_atomic"]

logger = get_logger(__name__)


def write_atomic(path: Path | str, payload: bytes) -> Path:
    """Write ``payload`` to ``path`` so readers never see a partial file.

    The bytes go to a temporary file in the destination directory, which then
    replaces the destination. An existing destination keeps its permission
    bits and a new one gets the umask-derived mode. On failure the temporary
    file is removed and a previous file at ``path`` is left untouched.

    Args:
        path: Destination file.
        payload: Complete file contents.

    Returns:
        The resolved destination path.

    Raises:
        DocumentWriteError: If any filesystem operation fails.

    """
    target = Path(path).absolute()
    temp_path: Path | None = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, _output_mode(target))
        os.replace(temp_path, target)
    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise DocumentWriteError(f"Failed to write {target}: {e}") from e

    logger.info("document_written", path=str(target), size=len(payload))
    return target


def _output_mode(target: Path) -> int:
    """Permission bits for the replacement file."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
