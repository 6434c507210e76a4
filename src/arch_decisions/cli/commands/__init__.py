"""CLI command implementations.

This module exports the command classes for the CLI.
"""

from arch_decisions.cli.commands.base import (
    BaseCommand,
    CommandResult,
    RunOptions,
    resolve_options,
)
from arch_decisions.cli.commands.generate import CheckCommand, GenerateCommand

__all__ = [
    "BaseCommand",
    "CheckCommand",
    "CommandResult",
    "GenerateCommand",
    "RunOptions",
    "resolve_options",
]
