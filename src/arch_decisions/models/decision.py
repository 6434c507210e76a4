"""Decision record models.

This module defines DecisionRecord, the unit the document is made of, along
with its usage sites and author-supplied metadata entries.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from arch_decisions.models.base import FrozenSchema
from arch_decisions.models.enums import ScopeKind

__all__ = [
    "DecisionRecord",
    "MetaEntry",
    "SourceLocation",
    "UsageSite",
]


class SourceLocation(FrozenSchema):
    """A position in a scanned file.

    Attributes:
        path: Path relative to the root directory, POSIX separators.
        line: 1-based line number.

    """

    path: str
    line: int


class MetaEntry(FrozenSchema):
    """One node of a record's author-defined metadata.

    An entry carries either a text value or child entries.
    """

    name: str
    value: str | None = None
    children: tuple["MetaEntry", ...] = ()

    @classmethod
    def from_literal(cls, name: str, value: Any) -> "MetaEntry":
        """Build an entry tree from a literal Python value.

        Mappings become nested entries, sequences become repeated ``item``
        children, scalars become the entry value.
        """
        if isinstance(value, Mapping):
            return cls(
                name=name,
                children=tuple(cls.from_literal(str(k), v) for k, v in value.items()),
            )
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=str)
        if isinstance(value, (list, tuple)):
            return cls(
                name=name,
                children=tuple(cls.from_literal("item", item) for item in value),
            )
        if value is None:
            return cls(name=name)
        if isinstance(value, bool):
            return cls(name=name, value="true" if value else "false")
        return cls(name=name, value=str(value))

    @classmethod
    def from_mapping(cls, meta: Mapping[str, Any]) -> tuple["MetaEntry", ...]:
        """Convert a ``meta`` mapping into top-level entries, preserving order."""
        return tuple(cls.from_literal(str(k), v) for k, v in meta.items())


class UsageSite(FrozenSchema):
    """A place in the code that applies a decision.

    Attributes:
        scope: Fully-qualified name of the decorated class, function or method.
        kind: Kind of the decorated definition.
        location: Where the decorator appears.
        decision: Qualified name of the referenced decision (back-reference).

    """

    scope: str
    kind: ScopeKind
    location: SourceLocation
    decision: str


class DecisionRecord(FrozenSchema):
    """A discovered architectural decision.

    Identity fields are frozen once gathered; only ``usages`` grows, during
    the locate phase.

    Attributes:
        identifier: Unique identifier within a run.
        qualified_name: Fully-qualified name of the declaring class.
        title: Optional human-readable title.
        date: Author-supplied date, opaque.
        status: Display value of the status.
        contents: Rationale text, possibly empty.
        metadata: Author-defined entries, in declaration order.
        source: Where the declaration is.
        usages: Usage sites, in discovery order.

    """

    identifier: str
    qualified_name: str
    title: str | None = None
    date: str
    status: str
    contents: str = ""
    metadata: tuple[MetaEntry, ...] = ()
    source: SourceLocation
    usages: list[UsageSite] = Field(default_factory=list)

    def add_usage(self, usage: UsageSite) -> None:
        """Append a usage site, rejecting sites that belong to another record."""
        if usage.decision != self.qualified_name:
            raise ValueError(
                f"Usage of {usage.decision} cannot be added to {self.qualified_name}"
            )
        self.usages.append(usage)
