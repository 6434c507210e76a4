"""Exceptions for the discovery module.

Configuration errors abort a run before any output is written. Unresolved
references only become errors under the ``fail`` reference policy.
"""

from arch_decisions.config.exceptions import ConfigurationError
from arch_decisions.exceptions import ArchDecisionsError

__all__ = [
    "DuplicateIdentifierError",
    "MissingRootError",
    "UnconstructibleDeclarationError",
    "UnresolvedReferenceError",
]


class MissingRootError(ConfigurationError):
    """Raised when a root directory does not exist or cannot be read."""

    def __init__(self, root: str, reason: str) -> None:
        super().__init__(f"Root directory {root} {reason}")
        self.root = root


class DuplicateIdentifierError(ConfigurationError):
    """Raised when two declarations yield the same decision identifier."""

    def __init__(self, identifier: str, first: str, second: str) -> None:
        super().__init__(
            f"Ambiguous decision identifier '{identifier}': declared by {first} and {second}"
        )
        self.identifier = identifier
        self.declarations = (first, second)


class UnconstructibleDeclarationError(ConfigurationError):
    """Raised when a declaration needs constructor arguments under the ``fail`` policy."""

    def __init__(self, qualified_name: str, parameters: tuple[str, ...]) -> None:
        super().__init__(
            f"Decision {qualified_name} cannot be instantiated without arguments "
            f"(requires: {', '.join(parameters)})"
        )
        self.qualified_name = qualified_name
        self.parameters = parameters


class UnresolvedReferenceError(ArchDecisionsError):
    """Raised when a usage names no gathered decision under the ``fail`` policy."""

    def __init__(self, target: str, scope: str, path: str, line: int) -> None:
        super().__init__(
            f"{path}:{line}: {scope} references unknown decision {target}"
        )
        self.target = target
        self.scope = scope
        self.path = path
        self.line = line
