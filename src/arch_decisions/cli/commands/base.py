"""Base command class for CLI commands.

This module defines the abstract base class for CLI commands following the
Command pattern, and the resolution of CLI flags, config file and
environment into the settings a command runs with.
"""

from abc import ABC, abstractmethod
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import Field

from arch_decisions.cli.exceptions import OutputPathError
from arch_decisions.config.loader import apply_overrides, load_config
from arch_decisions.config.settings import Settings, get_settings
from arch_decisions.models.base import BaseSchema
from arch_decisions.models.enums import ConstructionPolicy, ParseErrorPolicy, ReferencePolicy
from arch_decisions.pipeline import PipelineResult

__all__ = ["BaseCommand", "CommandResult", "RunOptions", "resolve_options"]


class CommandResult(BaseSchema):
    """Result of a command execution.

    Attributes:
        exit_code: Exit code for the CLI (0 for success).
        result: The pipeline result, when the pipeline ran.
        message: Optional message to display.

    """

    exit_code: int
    result: PipelineResult | None = None
    message: str | None = None


class RunOptions(BaseSchema):
    """Everything a run needs once flags, config file and environment are merged.

    Attributes:
        roots: Root directories to scan.
        output: Destination of the document.
        settings: Effective settings.

    """

    roots: list[Path] = Field(default_factory=list)
    output: Path
    settings: Settings


def resolve_options(args: Namespace, base: Settings | None = None) -> RunOptions:
    """Merge CLI flags over the config file over the environment settings.

    Args:
        args: Parsed command-line arguments.
        base: Settings to start from. Defaults to get_settings().

    Returns:
        RunOptions for the run.

    Raises:
        ConfigurationError: If the config file or an override is invalid.
        OutputPathError: If the output path names a directory.

    """
    settings = base or get_settings()
    roots: list[Path] = []
    output: Path | None = None

    config_path = getattr(args, "config", None)
    if config_path is not None:
        config = load_config(config_path)
        settings = apply_overrides(settings, config.discovery, config.document)
        roots = list(config.roots)
        output = config.output

    settings = apply_overrides(settings, _discovery_flags(args), _document_flags(args))

    if getattr(args, "roots", None):
        roots = [Path(root) for root in args.roots]
    if not roots:
        roots = [Path(".")]

    if getattr(args, "output", None) is not None:
        output = Path(args.output)
    if output is None:
        output = Path.cwd() / settings.document.output_filename
    if output.is_dir():
        raise OutputPathError(f"Output path is a directory: {output}")

    return RunOptions(roots=roots, output=output, settings=settings)


def _discovery_flags(args: Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if getattr(args, "strict", False):
        overrides["unconstructible"] = ConstructionPolicy.fail
        overrides["parse_errors"] = ParseErrorPolicy.fail
        overrides["unresolved_references"] = ReferencePolicy.fail

    # Explicit policy flags win over --strict
    if getattr(args, "unconstructible", None) is not None:
        overrides["unconstructible"] = ConstructionPolicy(args.unconstructible)
    if getattr(args, "parse_errors", None) is not None:
        overrides["parse_errors"] = ParseErrorPolicy(args.parse_errors)
    if getattr(args, "unresolved", None) is not None:
        overrides["unresolved_references"] = ReferencePolicy(args.unresolved)

    if getattr(args, "workers", None) is not None:
        overrides["max_workers"] = args.workers
    if getattr(args, "exclude_patterns", None):
        overrides["exclude_patterns"] = list(args.exclude_patterns)
    return overrides


def _document_flags(args: Namespace) -> dict[str, Any]:
    if getattr(args, "timestamp", None) is not None:
        return {"include_timestamp": args.timestamp}
    return {}


class BaseCommand(ABC):
    """Abstract base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the command name for logging and display."""
        pass

    @abstractmethod
    def execute(self, args: Namespace) -> CommandResult:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            CommandResult with exit code and the pipeline result.

        """
        pass
