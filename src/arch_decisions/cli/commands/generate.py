"""Generate command implementation.

This module implements the commands that build the architectural decisions
document: one writes it, the other only reports what it would contain.
"""

from argparse import Namespace

from arch_decisions.cli.commands.base import BaseCommand, CommandResult, resolve_options
from arch_decisions.logging_config import get_logger
from arch_decisions.pipeline import DecisionPipeline

__all__ = ["CheckCommand", "GenerateCommand"]

logger = get_logger(__name__)


class GenerateCommand(BaseCommand):
    """Command to generate and write the document."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "generate"

    def execute(self, args: Namespace) -> CommandResult:
        """Execute the generate command.

        Args:
            args: Parsed arguments with roots, output and overrides.

        Returns:
            CommandResult with the written document's pipeline result.

        Raises:
            ArchDecisionsError: On any fatal configuration, parse, reference
                or write error.

        """
        options = resolve_options(args)
        logger.debug(
            "command_started",
            command=self.name,
            roots=[str(root) for root in options.roots],
            output=str(options.output),
        )

        pipeline = DecisionPipeline(options.settings)
        result = pipeline.run(options.roots, options.output)

        return CommandResult(
            exit_code=0,
            result=result,
            message=f"Wrote {result.record_count} decisions to {result.output_path}",
        )


class CheckCommand(BaseCommand):
    """Command to build the document without writing it."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "check"

    def execute(self, args: Namespace) -> CommandResult:
        """Execute the check command.

        Args:
            args: Parsed arguments with roots and overrides.

        Returns:
            CommandResult with the unsaved pipeline result.

        """
        options = resolve_options(args)
        pipeline = DecisionPipeline(options.settings)
        result = pipeline.build(options.roots)
        # Serialize anyway so unrepresentable values fail here too
        pipeline.generator.to_xml(result.document)

        return CommandResult(
            exit_code=0,
            result=result,
            message=f"Found {result.record_count} decisions",
        )
