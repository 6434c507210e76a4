"""Validation utilities for CLI arguments."""

import argparse
from pathlib import Path

from arch_decisions.config.defaults import MAX_WORKERS_MAX, MAX_WORKERS_MIN

__all__ = ["validate_args"]


def validate_args(args: argparse.Namespace) -> str | None:
    """Validate CLI arguments for consistency.

    Roots are checked later by discovery, which reports every problem with a
    root in the same way whether it came from the command line or a config
    file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Error message if validation fails, None if valid.

    """
    config = getattr(args, "config", None)
    if config is not None:
        config_path = Path(config)
        if not config_path.is_file():
            return f"Error: Config file not found: {config}"
        if config_path.suffix not in (".yaml", ".yml"):
            return f"Error: Config file must be YAML: {config}"

    workers = getattr(args, "workers", None)
    if workers is not None and not MAX_WORKERS_MIN <= workers <= MAX_WORKERS_MAX:
        return f"Error: --workers must be between {MAX_WORKERS_MIN} and {MAX_WORKERS_MAX}"

    output = getattr(args, "output", None)
    if output is not None and Path(output).is_dir():
        return f"Error: Output path is a directory: {output}"

    if getattr(args, "dry_run", False) and output is not None:
        return "Error: --output cannot be combined with --dry-run"

    return None
