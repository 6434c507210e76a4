"""CLI argument parser configuration.

This module provides the argument parser for the arch-decisions CLI.
"""

import argparse

from arch_decisions import __version__
from arch_decisions.config.defaults import DEFAULT_OUTPUT_FILENAME
from arch_decisions.models.enums import ConstructionPolicy, ParseErrorPolicy, ReferencePolicy

__all__ = ["create_parser"]


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Options left unset on the command line are None, so the config file and
    environment settings can fill them in.

    Returns:
        An ArgumentParser configured with all CLI options.

    """
    parser = argparse.ArgumentParser(
        prog="arch-decisions",
        description=(
            "Collect the architectural decisions declared in Python sources, "
            "cross-reference the code that applies them and write an XML document."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan the current directory
  arch-decisions

  # Scan two roots and write the document elsewhere
  arch-decisions src plugins --output docs/decisions.xml

  # Fail on every recoverable problem
  arch-decisions src --strict

  # Use a project configuration file
  arch-decisions --config arch-decisions.yaml

  # Report what would be written, as JSON
  arch-decisions src --dry-run --json
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "roots",
        nargs="*",
        metavar="ROOT",
        help="Root directories to scan (default: the config file roots, or .)",
    )

    # Output configuration
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        metavar="FILE",
        help=f"Path of the generated document (default: ./{DEFAULT_OUTPUT_FILENAME})",
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="FILE",
        help="YAML project configuration file",
    )

    parser.add_argument(
        "--timestamp",
        action="store_true",
        default=None,
        help="Record the generation time in the document",
    )

    # Policies
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unconstructible declarations, parse errors and unresolved references as fatal",
    )

    parser.add_argument(
        "--unconstructible",
        choices=[p.value for p in ConstructionPolicy],
        help="Policy for declarations that need constructor arguments (default: skip)",
    )

    parser.add_argument(
        "--parse-errors",
        choices=[p.value for p in ParseErrorPolicy],
        help="Policy for source files that cannot be parsed (default: skip)",
    )

    parser.add_argument(
        "--unresolved",
        choices=[p.value for p in ReferencePolicy],
        help="Policy for usages naming no known decision (default: log)",
    )

    # Discovery
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of threads parsing files (1 disables parallel parsing)",
    )

    parser.add_argument(
        "--exclude",
        action="append",
        dest="exclude_patterns",
        metavar="PATTERN",
        help="Directory name pattern to skip; may be repeated",
    )

    # Output format
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the document and report on it without writing anything",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the summary as JSON instead of formatted text",
    )

    return parser
