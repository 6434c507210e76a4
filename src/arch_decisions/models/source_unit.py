"""In-memory model of one parsed source file.

A SourceUnit lists what a file declares and where it applies decorators.
Units are immutable and exist only for the duration of a single run.
"""

from typing import Any

from pydantic import Field

from arch_decisions.models.base import FrozenSchema
from arch_decisions.models.enums import ScopeKind

__all__ = [
    "AnnotationSite",
    "DeclaredType",
    "ParsedFile",
    "SourceUnit",
]


class DeclaredType(FrozenSchema):
    """A class statement and the facts about it that discovery needs.

    Attributes:
        name: Short class name.
        qualified_name: Dotted name following ``__qualname__`` rules.
        line: 1-based line of the ``class`` keyword.
        bases: Base class expressions as written (dotted names only).
        attributes: Class-level names bound to literal values, including
            zero-argument accessors that return a literal.
        dynamic_attributes: Class-level names bound to something that is not
            a literal.
        docstring: Raw docstring of the class body, if any.
        init_required: Required ``__init__`` parameters besides ``self``, or
            None when the class body defines no ``__init__``.
        is_dataclass: Whether a ``@dataclass`` decorator generates ``__init__``.
        dataclass_required: Annotated fields without a default value.
        abstract: Whether the body sets ``__abstract__ = True``.

    """

    name: str
    qualified_name: str
    line: int
    bases: tuple[str, ...] = ()
    attributes: dict[str, Any] = Field(default_factory=dict)
    dynamic_attributes: tuple[str, ...] = ()
    docstring: str | None = None
    init_required: tuple[str, ...] | None = None
    is_dataclass: bool = False
    dataclass_required: tuple[str, ...] = ()
    abstract: bool = False


class AnnotationSite(FrozenSchema):
    """A decorator applied to a class, function or method.

    Attributes:
        target: Decorator expression as a dotted name, with any call removed.
        scope: Fully-qualified name of the decorated definition.
        kind: Whether the decorated definition is a class or a function.
        line: 1-based line of the decorator.

    """

    target: str
    scope: str
    kind: ScopeKind
    line: int


class SourceUnit(FrozenSchema):
    """One parsed source file.

    Attributes:
        path: Path relative to its root, POSIX separators.
        root: Root directory the file was found under.
        module: Dotted module name derived from ``path``.
        is_package: Whether the file is a package ``__init__.py``.
        imports: Names bound by import statements, mapped to the dotted
            name they refer to.
        star_imports: Modules named by ``from module import *``, in source
            order.
        bound_names: Every name bound at module level.
        types: Declared classes in source order.
        functions: Qualified names of declared functions and methods.
        sites: Decorator applications in source order.

    """

    path: str
    root: str
    module: str
    is_package: bool = False
    imports: dict[str, str] = Field(default_factory=dict)
    star_imports: tuple[str, ...] = ()
    bound_names: frozenset[str] = frozenset()
    types: tuple[DeclaredType, ...] = ()
    functions: tuple[str, ...] = ()
    sites: tuple[AnnotationSite, ...] = ()


class ParsedFile(FrozenSchema):
    """Result of parsing one file: a unit on success, an error otherwise."""

    path: str
    root: str
    unit: SourceUnit | None = None
    error: str | None = None
    line: int | None = None

    @property
    def success(self) -> bool:
        return self.unit is not None
