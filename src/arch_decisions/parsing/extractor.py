"""SourceUnit extraction from parsed syntax trees.

This module walks a tree-sitter tree of a Python module and records what the
module declares (classes, functions, module-level names, imports) and where
it applies decorators. Values are read statically: class attributes are only
captured when they are literals, so no scanned code is ever executed.
"""

import ast
from pathlib import PurePosixPath
from typing import Any

import structlog
import tree_sitter

from arch_decisions.declarations import Status
from arch_decisions.models import AnnotationSite, DeclaredType, ScopeKind, SourceUnit
from arch_decisions.parsing.parser import ParseResult

__all__ = [
    "ACCESSOR_NAMES",
    "SourceUnitExtractor",
    "module_name_for",
]

logger = structlog.get_logger(__name__)

# Class-level names read from decision declarations.
ACCESSOR_NAMES = frozenset({"identifier", "title", "date", "status", "contents", "meta"})

DATACLASS_DECORATORS = frozenset(
    {"dataclass", "dataclasses.dataclass", "pydantic.dataclasses.dataclass"}
)

# Statements and clauses whose blocks still belong to the enclosing scope.
NESTED_BLOCK_TYPES = frozenset(
    {
        "block",
        "if_statement",
        "elif_clause",
        "else_clause",
        "try_statement",
        "except_clause",
        "except_group_clause",
        "finally_clause",
        "with_statement",
        "for_statement",
        "while_statement",
        "match_statement",
        "case_clause",
    }
)

_NOT_LITERAL = object()


def module_name_for(relative_path: str, root_name: str) -> tuple[str, bool]:
    """Derive the dotted module name of a file from its path under a root.

    Args:
        relative_path: POSIX path relative to the root directory.
        root_name: Name of the root directory, used for a root ``__init__.py``.

    Returns:
        Tuple of (module name, whether the file is a package ``__init__``).

    Example:
        >>> module_name_for("app/cache/__init__.py", "src")
        ('app.cache', True)

    """
    parts = list(PurePosixPath(relative_path).with_suffix("").parts)
    is_package = parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    return ".".join(parts) or root_name, is_package


class _UnitBuilder:
    """Mutable accumulator used while walking one tree."""

    def __init__(self, module: str, is_package: bool) -> None:
        self.module = module
        self.is_package = is_package
        self.imports: dict[str, str] = {}
        self.star_imports: list[str] = []
        self.bound_names: set[str] = set()
        self.types: list[DeclaredType] = []
        self.functions: list[str] = []
        self.sites: list[AnnotationSite] = []

    def bind_import(self, alias: str, target: str) -> None:
        self.imports[alias] = target
        self.bound_names.add(alias)


class SourceUnitExtractor:
    """Builds a SourceUnit from a successful ParseResult."""

    def extract(
        self,
        parsed: ParseResult,
        path: str,
        root: str,
        module: str,
        is_package: bool = False,
    ) -> SourceUnit:
        """Extract declarations, imports and decorator sites.

        Args:
            parsed: Successful parse of the file.
            path: POSIX path of the file relative to its root.
            root: Root directory the file was found under.
            module: Dotted module name of the file.
            is_package: Whether the file is a package ``__init__.py``.

        Returns:
            The immutable SourceUnit for the file.

        Raises:
            ValueError: If the parse did not succeed.

        """
        if not parsed.success or parsed.root_node is None:
            raise ValueError(f"Cannot extract a source unit from a failed parse of {path}")

        builder = _UnitBuilder(module, is_package)
        self._visit_block(parsed.root_node, module, builder, top_level=True)

        logger.debug(
            "source_unit_extracted",
            path=path,
            module=module,
            types=len(builder.types),
            sites=len(builder.sites),
        )

        return SourceUnit(
            path=path,
            root=root,
            module=module,
            is_package=is_package,
            imports=builder.imports,
            star_imports=tuple(builder.star_imports),
            bound_names=frozenset(builder.bound_names),
            types=tuple(builder.types),
            functions=tuple(builder.functions),
            sites=tuple(builder.sites),
        )

    def _visit_block(
        self,
        node: tree_sitter.Node,
        prefix: str,
        builder: _UnitBuilder,
        top_level: bool,
    ) -> None:
        for child in node.named_children:
            self._visit_statement(child, prefix, builder, top_level)

    def _visit_statement(
        self,
        node: tree_sitter.Node,
        prefix: str,
        builder: _UnitBuilder,
        top_level: bool,
    ) -> None:
        kind = node.type
        if kind == "decorated_definition":
            definition = node.child_by_field_name("definition")
            decorators = [c for c in node.named_children if c.type == "decorator"]
            if definition is not None:
                self._visit_definition(definition, decorators, prefix, builder, top_level)
        elif kind in ("class_definition", "function_definition"):
            self._visit_definition(node, [], prefix, builder, top_level)
        elif kind in NESTED_BLOCK_TYPES:
            self._visit_block(node, prefix, builder, top_level)
        elif not top_level:
            return
        elif kind == "import_statement":
            self._record_import(node, builder)
        elif kind == "import_from_statement":
            self._record_from_import(node, builder)
        elif kind == "expression_statement":
            for expr in node.named_children:
                if expr.type == "assignment":
                    _bind_targets(expr, builder.bound_names)

    def _visit_definition(
        self,
        node: tree_sitter.Node,
        decorators: list[tree_sitter.Node],
        prefix: str,
        builder: _UnitBuilder,
        top_level: bool,
    ) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        name = _text(name_node)
        qualified = f"{prefix}.{name}"
        kind = ScopeKind.class_ if node.type == "class_definition" else ScopeKind.function
        if top_level:
            builder.bound_names.add(name)

        applied: list[tuple[str, tree_sitter.Node | None]] = []
        for decorator in decorators:
            target, call = _decorator_target(decorator)
            if target is None:
                continue
            applied.append((target, call))
            builder.sites.append(
                AnnotationSite(target=target, scope=qualified, kind=kind, line=_line(decorator))
            )

        body = node.child_by_field_name("body")
        if kind is ScopeKind.class_:
            builder.types.append(self._declared_type(node, name, qualified, applied))
            if body is not None:
                self._visit_block(body, qualified, builder, top_level=False)
        else:
            builder.functions.append(qualified)
            if body is not None:
                self._visit_block(body, f"{qualified}.<locals>", builder, top_level=False)

    def _declared_type(
        self,
        node: tree_sitter.Node,
        name: str,
        qualified: str,
        applied: list[tuple[str, tree_sitter.Node | None]],
    ) -> DeclaredType:
        bases: list[str] = []
        superclasses = node.child_by_field_name("superclasses")
        if superclasses is not None:
            for argument in superclasses.named_children:
                expr = argument.child_by_field_name("value") if argument.type == "subscript" else argument
                dotted = _dotted(expr)
                if dotted is not None:
                    bases.append(dotted)

        is_dataclass = False
        for target, call in applied:
            if target in DATACLASS_DECORATORS:
                is_dataclass = not _keyword_is_false(call, "init")

        attributes: dict[str, Any] = {}
        dynamic: dict[str, None] = {}
        dataclass_required: list[str] = []
        init_required: tuple[str, ...] | None = None
        abstract = False
        docstring: str | None = None

        body = node.child_by_field_name("body")
        statements = [c for c in body.named_children if c.type != "comment"] if body else []
        if statements:
            docstring = _docstring(statements[0])

        for statement in statements:
            if statement.type == "expression_statement":
                for expr in statement.named_children:
                    if expr.type != "assignment":
                        continue
                    target, value = _class_assignment(expr, dataclass_required)
                    if target == "__abstract__":
                        abstract = value is True
                    elif target in ACCESSOR_NAMES:
                        _store(target, value, attributes, dynamic)
                continue

            function = statement
            if statement.type == "decorated_definition":
                function = statement.child_by_field_name("definition")
            if function is None or function.type != "function_definition":
                continue
            function_name = _text(function.child_by_field_name("name"))
            if function_name == "__init__":
                init_required = _required_parameters(function)
            elif function_name in ACCESSOR_NAMES:
                _store(function_name, _accessor_literal(function), attributes, dynamic)

        return DeclaredType(
            name=name,
            qualified_name=qualified,
            line=_line(node),
            bases=tuple(bases),
            attributes=attributes,
            dynamic_attributes=tuple(dynamic),
            docstring=docstring,
            init_required=init_required,
            is_dataclass=is_dataclass,
            dataclass_required=tuple(dataclass_required),
            abstract=abstract,
        )

    def _record_import(self, node: tree_sitter.Node, builder: _UnitBuilder) -> None:
        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                target = _text(name_node.child_by_field_name("name"))
                builder.bind_import(_text(name_node.child_by_field_name("alias")), target)
            elif name_node.type == "dotted_name":
                # ``import a.b.c`` binds ``a``
                head = _text(name_node).split(".", 1)[0]
                builder.bind_import(head, head)

    def _record_from_import(self, node: tree_sitter.Node, builder: _UnitBuilder) -> None:
        base = _import_base(node.child_by_field_name("module_name"), builder)
        if base is None:
            return
        if any(child.type == "wildcard_import" for child in node.children):
            if base not in builder.star_imports:
                builder.star_imports.append(base)
            return
        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                name = _text(name_node.child_by_field_name("name"))
                alias = _text(name_node.child_by_field_name("alias"))
            else:
                name = alias = _text(name_node)
            builder.bind_import(alias, f"{base}.{name}")


def _text(node: tree_sitter.Node | None) -> str:
    return node.text.decode("utf-8") if node is not None and node.text is not None else ""


def _line(node: tree_sitter.Node) -> int:
    return node.start_point[0] + 1


def _dotted(node: tree_sitter.Node | None) -> str | None:
    """Render an identifier or attribute chain as a dotted name."""
    if node is None:
        return None
    if node.type == "identifier":
        return _text(node)
    if node.type == "attribute":
        owner = _dotted(node.child_by_field_name("object"))
        attribute = node.child_by_field_name("attribute")
        if owner is not None and attribute is not None:
            return f"{owner}.{_text(attribute)}"
    return None


def _literal(node: tree_sitter.Node) -> Any:
    """Evaluate a literal expression, or return _NOT_LITERAL."""
    if node.type == "attribute":
        parts = (_dotted(node) or "").split(".")
        if len(parts) >= 2 and parts[-2] == "Status" and parts[-1] in Status.__members__:
            return Status[parts[-1]].value
        return _NOT_LITERAL
    try:
        return ast.literal_eval(_text(node))
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return _NOT_LITERAL


def _store(name: str, value: Any, attributes: dict[str, Any], dynamic: dict[str, None]) -> None:
    # later bindings in a class body replace earlier ones
    attributes.pop(name, None)
    dynamic.pop(name, None)
    if value is _NOT_LITERAL:
        dynamic[name] = None
    else:
        attributes[name] = value


def _docstring(statement: tree_sitter.Node) -> str | None:
    if statement.type != "expression_statement" or not statement.named_children:
        return None
    expr = statement.named_children[0]
    if expr.type not in ("string", "concatenated_string"):
        return None
    value = _literal(expr)
    return value if isinstance(value, str) else None


def _class_assignment(
    assignment: tree_sitter.Node,
    dataclass_required: list[str],
) -> tuple[str | None, Any]:
    """Read ``name = value`` or ``name: type [= value]`` from a class body."""
    left = assignment.child_by_field_name("left")
    right = assignment.child_by_field_name("right")
    if left is None or left.type != "identifier":
        return None, _NOT_LITERAL
    name = _text(left)

    if right is None:
        annotation = assignment.child_by_field_name("type")
        if annotation is not None and "ClassVar" not in _text(annotation):
            dataclass_required.append(name)
        return None, _NOT_LITERAL

    while right is not None and right.type == "assignment":
        right = right.child_by_field_name("right")
    if right is None:
        return name, _NOT_LITERAL
    return name, _literal(right)


def _accessor_literal(function: tree_sitter.Node) -> Any:
    """Value of a zero-argument method whose body is ``return <literal>``."""
    parameters = function.child_by_field_name("parameters")
    if parameters is None or len([p for p in parameters.named_children if p.type != "comment"]) != 1:
        return _NOT_LITERAL

    body = function.child_by_field_name("body")
    statements = [c for c in body.named_children if c.type != "comment"] if body else []
    if statements and _docstring(statements[0]) is not None:
        statements = statements[1:]
    if len(statements) != 1 or statements[0].type != "return_statement":
        return _NOT_LITERAL

    values = statements[0].named_children
    if len(values) != 1:
        return _NOT_LITERAL
    return _literal(values[0])


def _required_parameters(function: tree_sitter.Node) -> tuple[str, ...]:
    """Names of ``__init__`` parameters (after ``self``) that have no default."""
    parameters = function.child_by_field_name("parameters")
    if parameters is None:
        return ()

    required: list[str] = []
    for index, parameter in enumerate(p for p in parameters.named_children if p.type != "comment"):
        if index == 0:
            continue
        if parameter.type == "identifier":
            required.append(_text(parameter))
        elif parameter.type == "typed_parameter":
            first = parameter.named_children[0] if parameter.named_children else None
            if first is not None and first.type == "identifier":
                required.append(_text(first))
    return tuple(required)


def _decorator_target(decorator: tree_sitter.Node) -> tuple[str | None, tree_sitter.Node | None]:
    expr = next((c for c in decorator.named_children if c.type != "comment"), None)
    call = None
    if expr is not None and expr.type == "call":
        call = expr
        expr = expr.child_by_field_name("function")
    return _dotted(expr), call


def _keyword_is_false(call: tree_sitter.Node | None, keyword: str) -> bool:
    if call is None:
        return False
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return False
    for argument in arguments.named_children:
        if argument.type != "keyword_argument":
            continue
        if _text(argument.child_by_field_name("name")) == keyword:
            return _text(argument.child_by_field_name("value")) == "False"
    return False


def _bind_targets(assignment: tree_sitter.Node, names: set[str]) -> None:
    left = assignment.child_by_field_name("left")
    if left is None:
        return
    if left.type == "identifier":
        names.add(_text(left))
    elif left.type in ("pattern_list", "tuple_pattern", "list_pattern"):
        names.update(_text(c) for c in left.named_children if c.type == "identifier")
    right = assignment.child_by_field_name("right")
    if right is not None and right.type == "assignment":
        _bind_targets(right, names)


def _import_base(module_node: tree_sitter.Node | None, builder: _UnitBuilder) -> str | None:
    """Absolute module named by the ``from`` part of an import."""
    if module_node is None:
        return None
    if module_node.type == "dotted_name":
        return _text(module_node)
    if module_node.type != "relative_import":
        return None

    prefix = next((c for c in module_node.children if c.type == "import_prefix"), None)
    level = len(_text(prefix).strip()) if prefix is not None else 1
    dotted = next((c for c in module_node.named_children if c.type == "dotted_name"), None)

    package = builder.module.split(".")
    if not builder.is_package:
        package = package[:-1]
    if level - 1 > len(package):
        return None
    parts = package[: len(package) - (level - 1)]
    if dotted is not None:
        parts.append(_text(dotted))
    return ".".join(parts) or None
