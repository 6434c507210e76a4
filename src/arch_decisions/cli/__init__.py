"""CLI package for arch-decisions.

This package provides the command-line interface that gathers decisions,
locates their usages and writes the document. It implements the Command
pattern for its operations (generate, dry-run check).
"""

from arch_decisions.cli.commands import (
    BaseCommand,
    CheckCommand,
    CommandResult,
    GenerateCommand,
)
from arch_decisions.cli.formatters import format_diagnostics, format_summary
from arch_decisions.cli.main import CommandDispatcher, main
from arch_decisions.cli.parser import create_parser
from arch_decisions.cli.validators import validate_args

__all__ = [
    "BaseCommand",
    "CheckCommand",
    "CommandDispatcher",
    "CommandResult",
    "GenerateCommand",
    "create_parser",
    "format_diagnostics",
    "format_summary",
    "main",
    "validate_args",
]
