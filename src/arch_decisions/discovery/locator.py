"""Usage locator.

This module defines the UsageLocator, the second pass over the parsed
source units. It matches every decorator against the gathered decisions and
appends a UsageSite to each decision it references.
"""

from collections.abc import Iterable, Sequence

from pydantic import Field

from arch_decisions.config.settings import DiscoverySettings, get_settings
from arch_decisions.discovery.exceptions import UnresolvedReferenceError
from arch_decisions.discovery.symbols import SymbolTable
from arch_decisions.logging_config import get_logger
from arch_decisions.models import (
    AnnotationSite,
    DecisionRecord,
    Diagnostic,
    DiagnosticKind,
    ReferencePolicy,
    SourceLocation,
    SourceUnit,
    UsageSite,
)
from arch_decisions.models.base import BaseSchema

__all__ = ["LocateResult", "UsageLocator"]

logger = get_logger(__name__)


class LocateResult(BaseSchema):
    """Outcome of the locate pass.

    Attributes:
        records: The same records passed in, with usages appended.
        diagnostics: Unresolved references reported under the ``log`` policy.

    """

    records: list[DecisionRecord] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def usage_count(self) -> int:
        return sum(len(record.usages) for record in self.records)


class UsageLocator:
    """Cross-references decorator sites with gathered decision records."""

    def __init__(self, settings: DiscoverySettings | None = None) -> None:
        self.settings = settings or get_settings().discovery

    def locate(
        self,
        units: Sequence[SourceUnit],
        records: Iterable[DecisionRecord],
        skipped: Iterable[str] = (),
    ) -> LocateResult:
        """Append the usage sites of every record.

        Args:
            units: Parsed source units, in discovery order.
            records: Gathered records; their usage lists are extended in place.
            skipped: Decision classes the gatherer left out. Decorators naming
                them are reported as unresolved.

        Returns:
            LocateResult with the enriched records and any diagnostics.

        Raises:
            UnresolvedReferenceError: If a decorator names no gathered decision
                under the ``fail`` policy.

        """
        result = LocateResult(records=list(records))
        registry = {record.qualified_name: record for record in result.records}
        skipped_names = frozenset(skipped)
        table = SymbolTable(
            units,
            decision_bases=self.settings.decision_bases,
            documented_bases=self.settings.documented_bases,
        )

        for unit in units:
            for site in unit.sites:
                qualified = table.resolve(unit, site.target)
                if qualified is None:
                    continue

                record = registry.get(qualified)
                if record is None:
                    if qualified in skipped_names or table.is_dangling(qualified):
                        self._unresolved(result, unit, site, qualified)
                    continue

                if site.scope == record.qualified_name:
                    logger.debug("self_reference_ignored", declaration=record.qualified_name)
                    continue

                record.add_usage(
                    UsageSite(
                        scope=site.scope,
                        kind=site.kind,
                        location=SourceLocation(path=unit.path, line=site.line),
                        decision=record.qualified_name,
                    )
                )

        logger.info(
            "usages_located",
            records=len(result.records),
            usages=result.usage_count,
            unresolved=len(result.diagnostics),
        )
        return result

    def _unresolved(
        self,
        result: LocateResult,
        unit: SourceUnit,
        site: AnnotationSite,
        qualified: str,
    ) -> None:
        policy = self.settings.unresolved_references
        if policy is ReferencePolicy.fail:
            raise UnresolvedReferenceError(qualified, site.scope, unit.path, site.line)
        if policy is ReferencePolicy.ignore:
            return

        logger.warning(
            "unresolved_reference",
            target=qualified,
            scope=site.scope,
            path=unit.path,
            line=site.line,
        )
        result.diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.unresolved_reference,
                message=f"{site.scope} references unknown decision {qualified}",
                path=unit.path,
                line=site.line,
                subject=qualified,
            )
        )
