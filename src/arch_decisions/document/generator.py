"""Document generator.

This module defines the DocumentGenerator, which renders the enriched
decision records as the architectural decisions XML document.
"""

import re
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from xml.dom import minidom

from pydantic import Field

from arch_decisions.config.defaults import DEFAULT_NAMESPACE
from arch_decisions.document.exceptions import DocumentGenerationError
from arch_decisions.document.writer import write_atomic
from arch_decisions.logging_config import get_logger
from arch_decisions.models import DecisionRecord, Diagnostic, MetaEntry
from arch_decisions.models.base import BaseSchema

__all__ = [
    "DocumentGenerator",
    "GeneratedDocument",
    "MetaWriter",
]

logger = get_logger(__name__)

MetaWriter = Callable[[DecisionRecord, minidom.Element, minidom.Document], None]

ROOT_ELEMENT = "architecturalDecisions"
RECORD_ELEMENT = "architecturalDecision"

# Characters outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile(
    "[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


class GeneratedDocument(BaseSchema):
    """A document ready to be serialized.

    Attributes:
        records: Records in discovery order.
        namespace: XML namespace of the root element.
        generated_at: Generation time, or None when timestamps are disabled.
        diagnostics: Recoverable problems collected while building the records.

    """

    records: list[DecisionRecord] = Field(default_factory=list)
    namespace: str = DEFAULT_NAMESPACE
    generated_at: datetime | None = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def usage_count(self) -> int:
        return sum(len(record.usages) for record in self.records)


class DocumentGenerator:
    """Renders decision records as XML.

    Each record's ``meta`` element holds its metadata entries followed by
    whatever the registered meta writers append.

    Example:
        generator = DocumentGenerator()
        generator.add_meta_writer(lambda record, meta, doc: ...)
        document = generator.generate(records)
        generator.save(document, Path("architectural-decisions.xml"))

    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        include_timestamp: bool = False,
        meta_writers: Iterable[MetaWriter] = (),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            namespace: Namespace declared on the root element.
            include_timestamp: Whether to emit the ``generated`` attribute.
            meta_writers: Callables invoked for every record's ``meta`` element.
            clock: Source of the generation time. Defaults to the UTC now.

        """
        self.namespace = namespace
        self.include_timestamp = include_timestamp
        self.meta_writers: list[MetaWriter] = list(meta_writers)
        self._clock = clock or (lambda: datetime.now(UTC))

    def add_meta_writer(self, writer: MetaWriter) -> None:
        """Register a callable that adds nodes to every record's ``meta``."""
        self.meta_writers.append(writer)

    def generate(
        self,
        records: Iterable[DecisionRecord],
        diagnostics: Iterable[Diagnostic] = (),
    ) -> GeneratedDocument:
        """Assemble the document model for the given records.

        Args:
            records: Enriched records in discovery order.
            diagnostics: Diagnostics to carry alongside the document.

        Returns:
            GeneratedDocument preserving the record order.

        """
        document = GeneratedDocument(
            records=list(records),
            namespace=self.namespace,
            generated_at=self._clock() if self.include_timestamp else None,
            diagnostics=list(diagnostics),
        )
        logger.debug(
            "document_generated",
            records=len(document.records),
            usages=document.usage_count,
        )
        return document

    def to_xml(self, document: GeneratedDocument) -> bytes:
        """Serialize a document as UTF-8 encoded XML.

        Args:
            document: The document to serialize.

        Returns:
            The pretty-printed XML bytes, including the XML declaration.

        Raises:
            DocumentGenerationError: If a value contains characters that XML
                cannot represent.

        """
        dom = minidom.getDOMImplementation().createDocument(None, ROOT_ELEMENT, None)
        root = dom.documentElement
        root.setAttribute("xmlns", document.namespace)
        if document.generated_at is not None:
            root.setAttribute("generated", document.generated_at.isoformat())

        for record in document.records:
            root.appendChild(self._record_element(dom, record))

        try:
            return dom.toprettyxml(indent="  ", encoding="utf-8")
        finally:
            dom.unlink()

    def save(self, document: GeneratedDocument, path: Path | str) -> Path:
        """Serialize the document and write it atomically to ``path``.

        Raises:
            DocumentGenerationError: If the document cannot be serialized.
            DocumentWriteError: If the file cannot be written.

        """
        payload = self.to_xml(document)
        return write_atomic(path, payload)

    def _record_element(self, dom: minidom.Document, record: DecisionRecord) -> minidom.Element:
        element = dom.createElement(RECORD_ELEMENT)
        element.setAttribute("id", _checked(record.identifier, record, "id"))
        element.setAttribute("attribute", _checked(record.qualified_name, record, "attribute"))
        if record.title is not None:
            element.setAttribute("title", _checked(record.title, record, "title"))

        element.appendChild(_text_element(dom, "date", _checked(record.date, record, "date")))
        element.appendChild(
            _text_element(dom, "status", _checked(record.status, record, "status"))
        )
        element.appendChild(_contents_element(dom, _checked(record.contents, record, "contents")))

        annotations = dom.createElement("codeAnnotations")
        for usage in record.usages:
            annotation = dom.createElement("codeAnnotation")
            annotation.setAttribute("kind", usage.kind.value)
            annotation.setAttribute("file", _checked(usage.location.path, record, "file"))
            annotation.setAttribute("line", str(usage.location.line))
            annotation.appendChild(
                _text_element(dom, "class", _checked(usage.scope, record, "class"))
            )
            annotations.appendChild(annotation)
        element.appendChild(annotations)

        meta = dom.createElement("meta")
        for entry in record.metadata:
            meta.appendChild(_entry_element(dom, entry, record))
        for writer in self.meta_writers:
            writer(record, meta, dom)
        element.appendChild(meta)

        return element


def _checked(value: str, record: DecisionRecord, field: str) -> str:
    """Return ``value`` unchanged, or raise if XML cannot carry it."""
    match = _INVALID_XML_CHARS.search(value)
    if match is not None:
        raise DocumentGenerationError(
            f"Decision {record.identifier}: {field} contains character "
            f"U+{ord(match.group()):04X}, which is not allowed in XML"
        )
    return value


class _CharRefText(minidom.Text):
    """Text node that writes carriage returns as ``&#13;``.

    Parsers normalize a literal CR to LF, so only a character reference
    preserves it.
    """

    def writexml(self, writer, indent="", addindent="", newl=""):
        escaped = self.data.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        writer.write(indent + escaped.replace("\r", "&#13;") + newl)


def _text_node(dom: minidom.Document, text: str) -> minidom.Text:
    if "\r" not in text:
        return dom.createTextNode(text)
    node = _CharRefText()
    node.data = text
    node.ownerDocument = dom
    return node


def _text_element(dom: minidom.Document, name: str, text: str) -> minidom.Element:
    element = dom.createElement(name)
    if text:
        element.appendChild(_text_node(dom, text))
    return element


def _contents_element(dom: minidom.Document, text: str) -> minidom.Element:
    """Wrap contents in CDATA.

    Text that would close the section, or that holds carriage returns, is
    written as escaped character data instead.
    """
    element = dom.createElement("contents")
    if not text:
        return element
    if "]]>" in text or "\r" in text:
        element.appendChild(_text_node(dom, text))
    else:
        element.appendChild(dom.createCDATASection(text))
    return element


def _entry_element(
    dom: minidom.Document, entry: MetaEntry, record: DecisionRecord
) -> minidom.Element:
    element = dom.createElement("entry")
    element.setAttribute("name", _checked(entry.name, record, "meta"))
    if entry.value is not None:
        element.appendChild(_text_node(dom, _checked(entry.value, record, "meta")))
    for child in entry.children:
        element.appendChild(_entry_element(dom, child, record))
    return element
