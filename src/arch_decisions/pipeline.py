"""End-to-end generation pipeline.

This module wires the discovery passes and the document generator together:
gather declarations, locate their usages, render the document and write it.
"""

from collections.abc import Iterable
from pathlib import Path

from pydantic import Field

from arch_decisions.config.settings import Settings, get_settings
from arch_decisions.discovery.gatherer import DeclarationGatherer
from arch_decisions.discovery.locator import UsageLocator
from arch_decisions.document.generator import DocumentGenerator, GeneratedDocument
from arch_decisions.logging_config import get_logger
from arch_decisions.models import Diagnostic
from arch_decisions.models.base import BaseSchema

__all__ = ["DecisionPipeline", "PipelineResult"]

logger = get_logger(__name__)


class PipelineResult(BaseSchema):
    """Outcome of a pipeline run.

    Attributes:
        document: The generated document model.
        output_path: Where the document was written, or None if not saved.
        files_scanned: Number of source files parsed successfully.
        diagnostics: Recoverable problems from every pass, in pass order.

    """

    document: GeneratedDocument
    output_path: Path | None = None
    files_scanned: int = 0
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.document.records)

    @property
    def usage_count(self) -> int:
        return self.document.usage_count


class DecisionPipeline:
    """Runs gather, locate, generate and save as one batch.

    Example:
        pipeline = DecisionPipeline()
        result = pipeline.run([Path("src")], Path("architectural-decisions.xml"))
        print(result.record_count, "decisions")

    """

    def __init__(
        self,
        settings: Settings | None = None,
        generator: DocumentGenerator | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Settings for every pass. Defaults to get_settings().
            generator: Document generator, e.g. one with meta writers
                registered. Built from the document settings when omitted.

        """
        self.settings = settings or get_settings()
        self.gatherer = DeclarationGatherer(self.settings.discovery)
        self.locator = UsageLocator(self.settings.discovery)
        self.generator = generator or DocumentGenerator(
            namespace=self.settings.document.namespace,
            include_timestamp=self.settings.document.include_timestamp,
        )

    def build(self, roots: Iterable[Path | str]) -> PipelineResult:
        """Gather, locate and generate without writing anything.

        Args:
            roots: Root directories to scan.

        Returns:
            PipelineResult with the document and collected diagnostics.

        Raises:
            ArchDecisionsError: On any fatal configuration, parse or
                reference error.

        """
        gathered = self.gatherer.gather(roots)
        located = self.locator.locate(gathered.units, gathered.records, gathered.skipped)

        diagnostics = [*gathered.diagnostics, *located.diagnostics]
        document = self.generator.generate(located.records, diagnostics)
        return PipelineResult(
            document=document,
            files_scanned=len(gathered.units),
            diagnostics=diagnostics,
        )

    def run(self, roots: Iterable[Path | str], output: Path | str | None = None) -> PipelineResult:
        """Run the full pipeline and write the document.

        The document is serialized completely before the destination is
        touched, so a fatal error never leaves a partial file behind.

        Args:
            roots: Root directories to scan.
            output: Destination file. Defaults to the configured file name in
                the current directory.

        Returns:
            PipelineResult including the written path.

        Raises:
            ArchDecisionsError: On any fatal error.

        """
        result = self.build(roots)
        destination = Path(output) if output is not None else Path(
            self.settings.document.output_filename
        )
        written = self.generator.save(result.document, destination)

        logger.info(
            "pipeline_completed",
            output=str(written),
            records=result.record_count,
            usages=result.usage_count,
            diagnostics=len(result.diagnostics),
        )
        return result.model_copy(update={"output_path": written})
