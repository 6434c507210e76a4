"""CLI main entry point.

This module provides the main entry point for the arch-decisions CLI.
"""

import argparse
import sys
import traceback

from arch_decisions.cli.commands import CheckCommand, GenerateCommand
from arch_decisions.cli.formatters import format_diagnostics, format_summary
from arch_decisions.cli.parser import create_parser
from arch_decisions.cli.validators import validate_args
from arch_decisions.exceptions import ArchDecisionsError
from arch_decisions.logging_config import configure_logging, get_logger

__all__ = ["main", "CommandDispatcher"]

logger = get_logger(__name__)


class CommandDispatcher:
    """Dispatches CLI commands to appropriate handlers.

    Attributes:
        _generate_cmd: Command handler writing the document.
        _check_cmd: Command handler for dry runs.

    """

    def __init__(self) -> None:
        """Initialize the command dispatcher with all command handlers."""
        self._generate_cmd = GenerateCommand()
        self._check_cmd = CheckCommand()

    def dispatch(self, args: argparse.Namespace) -> int:
        """Dispatch to the appropriate command based on arguments.

        The summary and the command message go to stdout, diagnostics to
        stderr. In JSON mode stdout carries only the summary.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for errors).

        """
        command = self._check_cmd if getattr(args, "dry_run", False) else self._generate_cmd
        outcome = command.execute(args)

        json_output = getattr(args, "json_output", False)
        if outcome.result is not None:
            print(format_summary(outcome.result, json_output=json_output))
            if outcome.result.diagnostics:
                print(format_diagnostics(outcome.result.diagnostics), file=sys.stderr)
        if outcome.message and not json_output:
            print(outcome.message)
        return outcome.exit_code


def main(argv: list[str] | None = None) -> int:
    """Run the CLI application.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).

    """
    parser = create_parser()
    args = parser.parse_args(argv)

    _setup_logging(getattr(args, "verbose", False))

    error = validate_args(args)
    if error:
        print(error, file=sys.stderr)
        return 1

    try:
        dispatcher = CommandDispatcher()
        return dispatcher.dispatch(args)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except ArchDecisionsError as e:
        logger.debug("run_aborted", error_type=type(e).__name__, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        if getattr(args, "verbose", False):
            traceback.print_exc()
        return 1


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: Whether to enable debug-level logging to stderr.

    """
    configure_logging(verbose=verbose, json_output=False)


if __name__ == "__main__":
    sys.exit(main())
