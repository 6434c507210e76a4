"""Output formatting utilities for CLI.

This module provides functions for formatting run summaries and
diagnostics.
"""

import json

from arch_decisions.models import Diagnostic
from arch_decisions.pipeline import PipelineResult

__all__ = [
    "format_diagnostics",
    "format_summary",
]


def format_summary(result: PipelineResult, json_output: bool = False) -> str:
    """Format a pipeline result for output.

    Args:
        result: The pipeline result.
        json_output: Whether to format as JSON.

    Returns:
        Formatted string output.

    """
    if json_output:
        summary = {
            "output": str(result.output_path) if result.output_path else None,
            "files_scanned": result.files_scanned,
            "decisions": result.record_count,
            "usages": result.usage_count,
            "records": [
                {
                    "id": record.identifier,
                    "attribute": record.qualified_name,
                    "status": record.status,
                    "usages": len(record.usages),
                }
                for record in result.document.records
            ],
            "diagnostics": [d.model_dump(mode="json") for d in result.diagnostics],
        }
        return json.dumps(summary, indent=2)

    lines = []
    lines.append("")
    lines.append("=" * 60)
    lines.append("Architectural Decisions")
    lines.append("=" * 60)

    for record in result.document.records:
        noun = "usage" if len(record.usages) == 1 else "usages"
        lines.append(f"  {record.identifier} [{record.status}]: {len(record.usages)} {noun}")

    lines.append("")
    lines.append("-" * 60)
    lines.append("Summary")
    lines.append("-" * 60)
    lines.append(f"  Files scanned: {result.files_scanned}")
    lines.append(f"  Decisions: {result.record_count}")
    lines.append(f"  Usages: {result.usage_count}")
    lines.append(f"  Diagnostics: {len(result.diagnostics)}")
    if result.output_path is not None:
        lines.append(f"  Output: {result.output_path}")
    else:
        lines.append("  Output: not written (dry run)")

    return "\n".join(lines)


def format_diagnostics(diagnostics: list[Diagnostic]) -> str:
    """Format diagnostics one per line, for the error stream."""
    return "\n".join(f"warning: {diagnostic.format()}" for diagnostic in diagnostics)
