"""Runtime base classes for declaring architectural decisions.

A decision is declared as a class deriving from ArchitecturalDecision (or
DocumentedDecision, which takes its contents from the class docstring).
Instances of a decision class are decorators that mark the code the decision
applies to:

    class UseSqliteForCache(DocumentedDecision):
        \"\"\"The cache lives in SQLite because it survives restarts.\"\"\"

        date = "2024-03-01"
        status = Status.accepted

    @UseSqliteForCache()
    class CacheStore:
        ...

Discovery is static: the scanner reads these declarations from source
without importing them, so date, status, contents and meta must be literal
values (or zero-argument accessors returning a literal).
"""

import inspect
import re
from enum import Enum
from typing import Any, ClassVar, TypeVar

__all__ = [
    "ANNOTATIONS_ATTRIBUTE",
    "ArchitecturalDecision",
    "DocumentedDecision",
    "Status",
    "derive_identifier",
]

T = TypeVar("T")

# Attribute set on decorated targets, listing the applied decision classes.
ANNOTATIONS_ATTRIBUTE = "__architectural_decisions__"

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


def derive_identifier(qualified_name: str) -> str:
    """Derive a decision identifier from a fully-qualified class name.

    The identifier is the kebab-cased short name of the class, so two
    classes with the same name in different modules derive the same
    identifier.

    Args:
        qualified_name: Dotted name of the declaring class.

    Returns:
        Kebab-case identifier, e.g. "use-sqlite-for-cache".

    Example:
        >>> derive_identifier("app.decisions.UseSqliteForCache")
        'use-sqlite-for-cache'

    """
    short_name = qualified_name.rsplit(".", 1)[-1].strip("_")
    words = _WORD_BOUNDARY.sub("-", short_name)
    return _SEPARATORS.sub("-", words).strip("-").lower()


class Status(str, Enum):
    """Well-known decision statuses.

    The set is open: any string is accepted as a status and emitted verbatim.
    """

    draft = "Draft"
    proposed = "Proposed"
    accepted = "Accepted"
    rejected = "Rejected"
    deprecated = "Deprecated"
    superseded = "Superseded"


class ArchitecturalDecision:
    """Base class for decision records.

    Subclasses provide ``date``, ``status`` and ``contents``; ``title``,
    ``identifier`` and ``meta`` are optional. A subclass must be
    constructible without arguments, since applying it as a decorator
    instantiates it.

    Set ``__abstract__ = True`` on intermediate base classes that should not
    be reported as decisions themselves.
    """

    __abstract__: ClassVar[bool] = True

    identifier: ClassVar[str | None] = None
    title: ClassVar[str | None] = None
    meta: ClassVar[dict[str, Any]] = {}

    date: str
    status: "str | Status"
    contents: str

    def __call__(self, target: T) -> T:
        """Mark ``target`` as governed by this decision and return it unchanged."""
        applied = vars(target).get(ANNOTATIONS_ATTRIBUTE, ())
        setattr(target, ANNOTATIONS_ATTRIBUTE, (*applied, type(self)))
        return target

    @classmethod
    def qualified_name(cls) -> str:
        """Return the fully-qualified name of the declaring class."""
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def decision_id(cls) -> str:
        """Return the explicit identifier, or the one derived from the class name."""
        explicit = cls.__dict__.get("identifier")
        return explicit or derive_identifier(cls.qualified_name())

    @classmethod
    def is_abstract(cls) -> bool:
        """Whether this class is an intermediate base rather than a decision."""
        return bool(cls.__dict__.get("__abstract__", False))

    def display_status(self) -> str:
        """Return the status as emitted in the generated document."""
        status = self.status
        return status.value if isinstance(status, Status) else str(status)


class DocumentedDecision(ArchitecturalDecision):
    """Decision whose contents are the docstring of the declaring class.

    An explicit ``contents`` attribute on a subclass takes precedence over
    the docstring.
    """

    __abstract__ = True

    @property
    def contents(self) -> str:  # type: ignore[override]
        return inspect.cleandoc(type(self).__doc__ or "")
