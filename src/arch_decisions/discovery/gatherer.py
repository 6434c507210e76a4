"""Declaration gatherer.

This module defines the DeclarationGatherer, which walks root directories,
parses every source file into a SourceUnit and collects the declared
classes that satisfy the decision-record contract.
"""

import inspect
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from pydantic import Field

from arch_decisions.config.settings import DiscoverySettings, get_settings
from arch_decisions.declarations import derive_identifier
from arch_decisions.discovery.exceptions import (
    DuplicateIdentifierError,
    UnconstructibleDeclarationError,
)
from arch_decisions.discovery.symbols import Lineage, SymbolTable
from arch_decisions.discovery.walker import SourceWalker, validate_roots
from arch_decisions.logging_config import get_logger
from arch_decisions.models import (
    ConstructionPolicy,
    DecisionRecord,
    DeclaredType,
    Diagnostic,
    DiagnosticKind,
    MetaEntry,
    ParsedFile,
    ParseErrorPolicy,
    SourceLocation,
    SourceUnit,
)
from arch_decisions.models.base import BaseSchema
from arch_decisions.parsing.exceptions import SourceParseError
from arch_decisions.parsing.extractor import SourceUnitExtractor, module_name_for
from arch_decisions.parsing.parser import SourceParser

__all__ = ["DeclarationGatherer", "GatherResult"]

logger = get_logger(__name__)

_MISSING = object()


class GatherResult(BaseSchema):
    """Outcome of the gathering pass.

    Attributes:
        records: Accepted decisions, in discovery order.
        units: Parsed source units, in discovery order.
        diagnostics: Recoverable problems found while gathering.
        skipped: Qualified names of decision classes that were left out.

    """

    records: list[DecisionRecord] = Field(default_factory=list)
    units: list[SourceUnit] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class DeclarationGatherer:
    """Collects decision records from the source files under root directories.

    Example:
        gatherer = DeclarationGatherer()
        result = gatherer.gather([Path("src")])
        for record in result.records:
            print(record.identifier, record.status)

    """

    def __init__(
        self,
        settings: DiscoverySettings | None = None,
        parser: SourceParser | None = None,
        extractor: SourceUnitExtractor | None = None,
        walker: SourceWalker | None = None,
    ) -> None:
        """Initialize the gatherer.

        Args:
            settings: Discovery settings. Defaults to the environment settings.
            parser: Source parser, shared by all parsing threads.
            extractor: Builds SourceUnits from parse results.
            walker: Lists source files under a root.

        """
        self.settings = settings or get_settings().discovery
        self._parser = parser or SourceParser()
        self._extractor = extractor or SourceUnitExtractor()
        self._walker = walker or SourceWalker(self.settings.exclude_patterns)

    def gather(self, roots: Iterable[Path | str]) -> GatherResult:
        """Gather every decision record declared under ``roots``.

        Args:
            roots: Root directories, each treated as an import root.

        Returns:
            GatherResult with records, parsed units and diagnostics.

        Raises:
            MissingRootError: If a root is missing or unreadable.
            SourceParseError: If a file cannot be parsed, or a directory cannot
                be listed, under the ``fail`` policy.
            UnconstructibleDeclarationError: If a declaration needs constructor
                arguments under the ``fail`` policy.
            DuplicateIdentifierError: If two declarations share an identifier.

        """
        validated = validate_roots(roots)
        files: list[tuple[Path, Path]] = []
        unreadable: list[ParsedFile] = []
        for root in validated:
            errors: list[OSError] = []
            files.extend((root, path) for path in self._walker.walk(root, on_error=errors.append))
            unreadable.extend(_unreadable_directory(root, error) for error in errors)
        logger.info(
            "gathering_started",
            roots=[str(r) for r in validated],
            files=len(files),
        )

        result = GatherResult()
        for parsed in [*unreadable, *self.parse_all(files)]:
            if parsed.unit is not None:
                result.units.append(parsed.unit)
                continue
            if self.settings.parse_errors is ParseErrorPolicy.fail:
                raise SourceParseError(
                    f"{parsed.path}: {parsed.error}", path=parsed.path, line=parsed.line
                )
            logger.warning("file_skipped", path=parsed.path, error=parsed.error)
            result.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.parse_error,
                    message=parsed.error or "Cannot parse file",
                    path=parsed.path,
                    line=parsed.line,
                )
            )

        table = self.symbol_table(result.units)
        by_identifier: dict[str, DecisionRecord] = {}
        for unit in result.units:
            for declared in unit.types:
                record = self._build_record(declared, unit, table, result)
                if record is None:
                    continue
                existing = by_identifier.get(record.identifier)
                if existing is not None:
                    raise DuplicateIdentifierError(
                        record.identifier, existing.qualified_name, record.qualified_name
                    )
                by_identifier[record.identifier] = record
                result.records.append(record)

        logger.info(
            "gathering_completed",
            units=len(result.units),
            records=len(result.records),
            diagnostics=len(result.diagnostics),
        )
        return result

    def symbol_table(self, units: Iterable[SourceUnit]) -> SymbolTable:
        """Build the symbol table used to resolve bases and decorators."""
        return SymbolTable(
            units,
            decision_bases=self.settings.decision_bases,
            documented_bases=self.settings.documented_bases,
        )

    def parse_all(self, files: list[tuple[Path, Path]]) -> list[ParsedFile]:
        """Parse files, in parallel when configured, keeping the input order.

        Args:
            files: (root, absolute path) pairs in discovery order.

        Returns:
            One ParsedFile per input pair, in the same order.

        """
        if self.settings.max_workers <= 1 or len(files) <= 1:
            return [self.parse_file(root, path) for root, path in files]

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            futures = [executor.submit(self.parse_file, root, path) for root, path in files]
            return [future.result() for future in futures]

    def parse_file(self, root: Path, path: Path) -> ParsedFile:
        """Parse one file into a ParsedFile; failures are returned, not raised."""
        relative = path.relative_to(root).as_posix()
        module, is_package = module_name_for(relative, root.name)

        try:
            parsed = self._parser.parse_file(path)
        except SourceParseError as e:
            return ParsedFile(path=relative, root=str(root), error=str(e))

        if not parsed.success:
            return ParsedFile(
                path=relative,
                root=str(root),
                error=parsed.error,
                line=parsed.error_line,
            )

        unit = self._extractor.extract(parsed, relative, str(root), module, is_package)
        return ParsedFile(path=relative, root=str(root), unit=unit)

    def _build_record(
        self,
        declared: DeclaredType,
        unit: SourceUnit,
        table: SymbolTable,
        result: GatherResult,
    ) -> DecisionRecord | None:
        lineage = table.lineage(declared, unit)
        if not lineage.reaches_base:
            return None

        qualified = declared.qualified_name
        if declared.abstract:
            logger.debug("abstract_declaration_ignored", declaration=qualified)
            return None

        values, problems = _read_contract(lineage)
        if problems:
            self._skip(
                result,
                DiagnosticKind.incomplete_declaration,
                f"{qualified} is not a complete decision: {'; '.join(problems)}",
                unit,
                declared,
            )
            return None

        required = _constructor_requirements(lineage)
        if required:
            if self.settings.unconstructible is ConstructionPolicy.fail:
                raise UnconstructibleDeclarationError(qualified, required)
            self._skip(
                result,
                DiagnosticKind.unconstructible,
                f"{qualified} cannot be instantiated without arguments "
                f"(requires: {', '.join(required)})",
                unit,
                declared,
            )
            return None

        record = DecisionRecord(
            identifier=values["identifier"] or derive_identifier(qualified),
            qualified_name=qualified,
            title=values["title"],
            date=values["date"],
            status=values["status"],
            contents=values["contents"],
            metadata=MetaEntry.from_mapping(values["meta"]),
            source=SourceLocation(path=unit.path, line=declared.line),
        )
        logger.debug(
            "declaration_gathered",
            declaration=qualified,
            identifier=record.identifier,
            path=unit.path,
        )
        return record

    def _skip(
        self,
        result: GatherResult,
        kind: DiagnosticKind,
        message: str,
        unit: SourceUnit,
        declared: DeclaredType,
    ) -> None:
        logger.warning(
            "declaration_skipped",
            declaration=declared.qualified_name,
            reason=kind.value,
            path=unit.path,
        )
        result.skipped.append(declared.qualified_name)
        result.diagnostics.append(
            Diagnostic(
                kind=kind,
                message=message,
                path=unit.path,
                line=declared.line,
                subject=declared.qualified_name,
            )
        )


def _unreadable_directory(root: Path, error: OSError) -> ParsedFile:
    """Describe a directory the walker could not list as a failed file."""
    location = Path(error.filename) if error.filename else root
    try:
        relative = location.relative_to(root).as_posix()
    except ValueError:
        relative = str(location)
    return ParsedFile(
        path=relative,
        root=str(root),
        error=f"Cannot read directory: {error.strerror or error}",
    )


def _lookup(lineage: Lineage, name: str) -> tuple[Any, bool]:
    """Nearest binding of ``name`` in the lineage as (value, is_dynamic)."""
    for declared in lineage.types:
        if name in declared.attributes:
            return declared.attributes[name], False
        if name in declared.dynamic_attributes:
            return _MISSING, True
    return _MISSING, False


def _read_contract(lineage: Lineage) -> tuple[dict[str, Any], list[str]]:
    """Read the decision accessors, returning values and contract violations.

    An explicit ``contents`` anywhere in the lineage takes precedence over the
    docstring of a documented decision.
    """
    declared = lineage.types[0]
    values: dict[str, Any] = {}
    problems: list[str] = []

    for name in ("date", "status"):
        value, dynamic = _lookup(lineage, name)
        if dynamic:
            problems.append(f"{name} is not a literal value")
        elif value is _MISSING:
            problems.append(f"missing {name}")
        elif not isinstance(value, str):
            problems.append(f"{name} must be a string")
        values[name] = value

    contents, dynamic = _lookup(lineage, "contents")
    if dynamic:
        problems.append("contents is not a literal value")
    elif contents is _MISSING:
        if lineage.documented:
            contents = inspect.cleandoc(declared.docstring or "")
        else:
            problems.append("missing contents")
    elif not isinstance(contents, str):
        problems.append("contents must be a string")
    values["contents"] = contents

    title, dynamic = _lookup(lineage, "title")
    if dynamic:
        problems.append("title is not a literal value")
    elif title is _MISSING:
        title = None
    elif title is not None and not isinstance(title, str):
        problems.append("title must be a string")
    values["title"] = title

    # identifiers are not inherited: a shared one would make every subclass collide
    identifier = declared.attributes.get("identifier")
    if "identifier" in declared.dynamic_attributes:
        problems.append("identifier is not a literal value")
    elif identifier is not None and (not isinstance(identifier, str) or not identifier.strip()):
        problems.append("identifier must be a non-empty string")
    values["identifier"] = identifier

    meta, dynamic = _lookup(lineage, "meta")
    if dynamic:
        problems.append("meta is not a literal value")
    elif meta is _MISSING or meta is None:
        meta = {}
    elif not isinstance(meta, dict):
        problems.append("meta must be a dict")
    values["meta"] = meta

    return values, problems


def _constructor_requirements(lineage: Lineage) -> tuple[str, ...]:
    """Arguments needed to instantiate the first class of the lineage."""
    for index, declared in enumerate(lineage.types):
        if declared.init_required is not None:
            return declared.init_required
        if declared.is_dataclass:
            fields: list[str] = []
            for ancestor in reversed(lineage.types[index:]):
                if ancestor.is_dataclass:
                    fields.extend(ancestor.dataclass_required)
            return tuple(dict.fromkeys(fields))
    return ()
