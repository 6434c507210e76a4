"""Name resolution across parsed source units.

The SymbolTable maps the names a module uses (decorators, base classes) to
fully-qualified names, following imports and re-exports between scanned
modules. It is the shared index behind both discovery passes: the gatherer
uses it to find decision subclasses, the locator to match decorators.
"""

from collections.abc import Iterable

from arch_decisions.models import DeclaredType, SourceUnit
from arch_decisions.models.base import FrozenSchema

__all__ = ["Lineage", "SymbolTable"]

# Upper bound on re-export hops followed while resolving one name.
MAX_REEXPORT_HOPS = 32


class Lineage(FrozenSchema):
    """Scanned ancestry of a declared class.

    Attributes:
        types: The class followed by its scanned ancestors, nearest first.
        reaches_base: Whether any ancestor is a configured decision base.
        documented: Whether a docstring-backed decision base was reached.

    """

    types: tuple[DeclaredType, ...]
    reaches_base: bool = False
    documented: bool = False


class SymbolTable:
    """Index of the modules, classes and functions in a set of source units.

    When two units claim the same module or qualified name, the first one in
    discovery order wins.
    """

    def __init__(
        self,
        units: Iterable[SourceUnit],
        decision_bases: Iterable[str] = (),
        documented_bases: Iterable[str] = (),
    ) -> None:
        self._modules: dict[str, SourceUnit] = {}
        self._types: dict[str, tuple[DeclaredType, SourceUnit]] = {}
        self._functions: set[str] = set()

        for unit in units:
            self._modules.setdefault(unit.module, unit)
            for declared in unit.types:
                self._types.setdefault(declared.qualified_name, (declared, unit))
            self._functions.update(unit.functions)

        self.documented_bases = frozenset(documented_bases)
        self.decision_bases = frozenset(decision_bases) | self.documented_bases

    def resolve(self, unit: SourceUnit, dotted: str) -> str | None:
        """Resolve a dotted name used in ``unit`` to a fully-qualified name.

        Args:
            unit: The module the name appears in.
            dotted: Name as written, e.g. ``decisions.UseSqlite``.

        Returns:
            Fully-qualified name, or None for names the module never binds
            (builtins, typos).

        """
        head, _, tail = dotted.partition(".")
        if head in unit.imports:
            base = unit.imports[head]
        elif head in unit.bound_names:
            base = f"{unit.module}.{head}"
        else:
            base = self._star_export(unit, head)
            if base is None:
                return None
        return self.canonical(f"{base}.{tail}" if tail else base)

    def canonical(self, qualified: str) -> str:
        """Follow re-exports until the name a class or function is declared under."""
        for _ in range(MAX_REEXPORT_HOPS):
            if qualified in self._types or qualified in self._functions:
                return qualified
            unit, remainder = self._split(qualified)
            if unit is None:
                return qualified
            head, _, tail = remainder.partition(".")
            target = unit.imports.get(head)
            if target is None and head not in unit.bound_names:
                target = self._star_export(unit, head)
            if target is None:
                return qualified
            qualified = f"{target}.{tail}" if tail else target
        return qualified

    def lookup_type(self, qualified: str) -> tuple[DeclaredType, SourceUnit] | None:
        """Return the declared class with this name and its unit, if scanned."""
        return self._types.get(qualified)

    def is_declared(self, qualified: str) -> bool:
        return qualified in self._types or qualified in self._functions

    def is_dangling(self, qualified: str) -> bool:
        """Whether a name points into a scanned module that does not bind it.

        This is what a decorator looks like after the decision it named was
        deleted or renamed.
        """
        unit, remainder = self._split(qualified)
        if unit is None:
            return False
        head = remainder.partition(".")[0]
        if head in unit.bound_names or self._star_export(unit, head) is not None:
            return False
        # a star import from outside the scan may bind anything
        return all(module in self._modules for module in unit.star_imports)

    def lineage(self, declared: DeclaredType, unit: SourceUnit) -> Lineage:
        """Collect the scanned ancestors of a class, depth-first, left to right."""
        chain: list[DeclaredType] = [declared]
        seen = {declared.qualified_name}
        reaches_base = False
        documented = False

        def visit(current: DeclaredType, owner: SourceUnit) -> None:
            nonlocal reaches_base, documented
            for base in current.bases:
                qualified = self.resolve(owner, base)
                if qualified is None:
                    continue
                if qualified in self.decision_bases:
                    reaches_base = True
                    documented = documented or qualified in self.documented_bases
                    continue
                found = self._types.get(qualified)
                if found is None or qualified in seen:
                    continue
                seen.add(qualified)
                chain.append(found[0])
                visit(*found)

        visit(declared, unit)
        return Lineage(types=tuple(chain), reaches_base=reaches_base, documented=documented)

    def _star_export(
        self, unit: SourceUnit, name: str, seen: set[str] | None = None
    ) -> str | None:
        """Qualified name that ``from module import *`` statements bind ``name`` to.

        Star imports are followed transitively through scanned modules.
        Underscore names are never exported this way.
        """
        if name.startswith("_"):
            return None
        if seen is None:
            seen = {unit.module}
        for module in unit.star_imports:
            source = self._modules.get(module)
            if source is None or module in seen:
                continue
            seen.add(module)
            if name in source.bound_names:
                return f"{module}.{name}"
            found = self._star_export(source, name, seen)
            if found is not None:
                return found
        return None

    def _split(self, qualified: str) -> tuple[SourceUnit | None, str]:
        """Split a name into its longest scanned module and the remainder."""
        parts = qualified.split(".")
        for index in range(len(parts) - 1, 0, -1):
            unit = self._modules.get(".".join(parts[:index]))
            if unit is not None:
                return unit, ".".join(parts[index:])
        return None, ""
