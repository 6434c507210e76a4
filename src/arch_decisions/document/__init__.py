"""Document generation for architectural decisions.

This package renders enriched decision records as an XML document and
writes it atomically.
"""

from arch_decisions.document.exceptions import (
    DocumentError,
    DocumentGenerationError,
    DocumentWriteError,
)
from arch_decisions.document.generator import (
    DocumentGenerator,
    GeneratedDocument,
    MetaWriter,
)
from arch_decisions.document.writer import write_atomic

__all__ = [
    "DocumentError",
    "DocumentGenerationError",
    "DocumentGenerator",
    "DocumentWriteError",
    "GeneratedDocument",
    "MetaWriter",
    "write_atomic",
]
