"""Unit tests for SymbolTable name resolution."""

from collections.abc import Callable

from arch_decisions.discovery import SymbolTable
from arch_decisions.models import SourceUnit

ExtractUnit = Callable[..., SourceUnit]

BASES = ["arch_decisions.ArchitecturalDecision"]
DOCUMENTED = ["arch_decisions.DocumentedDecision"]


def _units(extract_unit: ExtractUnit) -> dict[str, SourceUnit]:
    units = {
        "core": extract_unit(
            """
            from arch_decisions import ArchitecturalDecision, DocumentedDecision


            class BaseChoice(ArchitecturalDecision):
                __abstract__ = True
                date = "2024-01-01"


            class UseSqlite(BaseChoice):
                status = "Accepted"
                contents = "x"


            class Layered(DocumentedDecision):
                \"\"\"Layers.\"\"\"


            def register(target):
                return target
            """,
            module="app.decisions.core",
            path="app/decisions/core.py",
        ),
        "package": extract_unit(
            "from .core import UseSqlite\nfrom .core import UseSqlite as Sqlite\n",
            module="app.decisions",
            path="app/decisions/__init__.py",
            is_package=True,
        ),
        "cache": extract_unit(
            """
            import functools
            from app import decisions
            from app.decisions import Sqlite
            from app.decisions.core import register

            helper = object()
            """,
            module="app.cache",
            path="app/cache.py",
        ),
    }
    return units


def _table(units: dict[str, SourceUnit]) -> SymbolTable:
    return SymbolTable(units.values(), decision_bases=BASES, documented_bases=DOCUMENTED)


class TestResolve:
    """Tests for SymbolTable.resolve and canonical."""

    def test_follows_reexports(self, extract_unit: ExtractUnit) -> None:
        """Test that names imported through a package resolve to the declaration."""
        units = _units(extract_unit)
        table = _table(units)

        assert table.resolve(units["cache"], "Sqlite") == "app.decisions.core.UseSqlite"
        assert (
            table.resolve(units["cache"], "decisions.UseSqlite")
            == "app.decisions.core.UseSqlite"
        )

    def test_local_names(self, extract_unit: ExtractUnit) -> None:
        """Test that names bound in the module resolve within it."""
        units = _units(extract_unit)
        table = _table(units)

        assert table.resolve(units["core"], "UseSqlite") == "app.decisions.core.UseSqlite"
        assert table.resolve(units["cache"], "helper.wrap") == "app.cache.helper.wrap"

    def test_external_and_unbound_names(self, extract_unit: ExtractUnit) -> None:
        """Test that external names pass through and unbound names resolve to None."""
        units = _units(extract_unit)
        table = _table(units)

        assert table.resolve(units["cache"], "functools.lru_cache") == "functools.lru_cache"
        assert table.resolve(units["cache"], "property") is None

    def test_functions_are_declared(self, extract_unit: ExtractUnit) -> None:
        """Test that scanned functions count as declared names."""
        units = _units(extract_unit)
        table = _table(units)

        qualified = table.resolve(units["cache"], "register")
        assert qualified == "app.decisions.core.register"
        assert table.is_declared(qualified)


class TestDangling:
    """Tests for SymbolTable.is_dangling."""

    def test_missing_name_in_scanned_module(self, extract_unit: ExtractUnit) -> None:
        """Test that a name a scanned module does not bind is dangling."""
        table = _table(_units(extract_unit))

        assert table.is_dangling("app.decisions.Removed") is True
        assert table.is_dangling("app.decisions.core.Removed") is True

    def test_bound_or_external_names_not_dangling(self, extract_unit: ExtractUnit) -> None:
        """Test that bound names and names outside the scan are not dangling."""
        table = _table(_units(extract_unit))

        assert table.is_dangling("app.cache.helper") is False
        assert table.is_dangling("app.decisions.core.UseSqlite") is False
        assert table.is_dangling("functools.lru_cache") is False


class TestLineage:
    """Tests for SymbolTable.lineage."""

    def test_lineage_through_scanned_base(self, extract_unit: ExtractUnit) -> None:
        """Test that scanned ancestors are collected nearest first."""
        units = _units(extract_unit)
        table = _table(units)
        declared, unit = table.lookup_type("app.decisions.core.UseSqlite")

        lineage = table.lineage(declared, unit)

        assert [t.name for t in lineage.types] == ["UseSqlite", "BaseChoice"]
        assert lineage.reaches_base is True
        assert lineage.documented is False

    def test_documented_base(self, extract_unit: ExtractUnit) -> None:
        """Test that reaching a documented base is reported."""
        units = _units(extract_unit)
        table = _table(units)
        declared, unit = table.lookup_type("app.decisions.core.Layered")

        lineage = table.lineage(declared, unit)

        assert lineage.reaches_base is True
        assert lineage.documented is True

    def test_unrelated_class(self, extract_unit: ExtractUnit) -> None:
        """Test that classes not deriving from a decision base do not reach one."""
        unit = extract_unit(
            """
            class Plain(object):
                pass

            class Loop(Loop):
                pass
            """
        )
        table = SymbolTable([unit], decision_bases=BASES)

        assert table.lineage(unit.types[0], unit).reaches_base is False
        assert [t.name for t in table.lineage(unit.types[1], unit).types] == ["Loop"]

    def test_lookup_missing_type(self, extract_unit: ExtractUnit) -> None:
        """Test that unknown names have no declared type."""
        table = _table(_units(extract_unit))

        assert table.lookup_type("app.decisions.core.Missing") is None
