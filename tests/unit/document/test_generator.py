"""Unit tests for DocumentGenerator."""

import xml.etree.ElementTree as ET
from datetime import UTC, datetime
from pathlib import Path
from xml.dom import minidom

import pytest

from arch_decisions.config.defaults import DEFAULT_NAMESPACE
from arch_decisions.document import DocumentGenerationError, DocumentGenerator
from arch_decisions.models import (
    DecisionRecord,
    Diagnostic,
    DiagnosticKind,
    MetaEntry,
    ScopeKind,
    SourceLocation,
    UsageSite,
)

NS = {"d": DEFAULT_NAMESPACE}


def _record(identifier: str = "use-sqlite", **overrides: object) -> DecisionRecord:
    values: dict[str, object] = {
        "identifier": identifier,
        "qualified_name": f"app.decisions.{identifier.title().replace('-', '')}",
        "date": "2024-01-02",
        "status": "Accepted",
        "contents": "Store the cache in SQLite.",
        "source": SourceLocation(path="app/decisions.py", line=4),
    }
    values.update(overrides)
    return DecisionRecord(**values)


def _with_usages(record: DecisionRecord, *scopes: tuple[str, ScopeKind, str, int]) -> DecisionRecord:
    for scope, kind, path, line in scopes:
        record.add_usage(
            UsageSite(
                scope=scope,
                kind=kind,
                location=SourceLocation(path=path, line=line),
                decision=record.qualified_name,
            )
        )
    return record


def _parse(payload: bytes) -> ET.Element:
    return ET.fromstring(payload)


class TestGenerate:
    """Tests for DocumentGenerator.generate."""

    def test_preserves_order_and_diagnostics(self) -> None:
        """Test that records keep their order and diagnostics are carried."""
        records = [_record("b-first"), _record("a-second")]
        diagnostic = Diagnostic(kind=DiagnosticKind.parse_error, message="boom")

        document = DocumentGenerator().generate(records, [diagnostic])

        assert [r.identifier for r in document.records] == ["b-first", "a-second"]
        assert document.diagnostics == [diagnostic]
        assert document.namespace == DEFAULT_NAMESPACE
        assert document.generated_at is None

    def test_timestamp_uses_clock(self) -> None:
        """Test that the generation time comes from the clock when enabled."""
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        generator = DocumentGenerator(include_timestamp=True, clock=lambda: moment)

        document = generator.generate([])

        assert document.generated_at == moment


class TestToXml:
    """Tests for the XML rendering."""

    def test_document_structure(self) -> None:
        """Test that a record renders with every element of the schema."""
        record = _with_usages(
            _record(title="Use SQLite", metadata=(MetaEntry(name="owner", value="platform"),)),
            ("app.api.handle", ScopeKind.function, "app/api.py", 5),
            ("app.cache.Store", ScopeKind.class_, "app/cache.py", 12),
        )
        generator = DocumentGenerator()

        root = _parse(generator.to_xml(generator.generate([record])))

        assert root.tag == f"{{{DEFAULT_NAMESPACE}}}architecturalDecisions"
        assert root.get("generated") is None
        decision = root.find("d:architecturalDecision", NS)
        assert decision is not None
        assert decision.get("id") == "use-sqlite"
        assert decision.get("attribute") == "app.decisions.UseSqlite"
        assert decision.get("title") == "Use SQLite"
        assert decision.findtext("d:date", namespaces=NS) == "2024-01-02"
        assert decision.findtext("d:status", namespaces=NS) == "Accepted"
        assert decision.findtext("d:contents", namespaces=NS) == "Store the cache in SQLite."

        annotations = decision.findall("d:codeAnnotations/d:codeAnnotation", NS)
        assert [a.findtext("d:class", namespaces=NS) for a in annotations] == [
            "app.api.handle",
            "app.cache.Store",
        ]
        assert [(a.get("kind"), a.get("file"), a.get("line")) for a in annotations] == [
            ("function", "app/api.py", "5"),
            ("class", "app/cache.py", "12"),
        ]

        entries = decision.findall("d:meta/d:entry", NS)
        assert [(e.get("name"), e.text) for e in entries] == [("owner", "platform")]

    def test_child_order(self) -> None:
        """Test that record children appear in schema order."""
        generator = DocumentGenerator()

        root = _parse(generator.to_xml(generator.generate([_record()])))
        decision = root.find("d:architecturalDecision", NS)

        assert [child.tag.split("}")[1] for child in decision] == [
            "date",
            "status",
            "contents",
            "codeAnnotations",
            "meta",
        ]

    def test_declaration_and_encoding(self) -> None:
        """Test that the output is UTF-8 with an XML declaration."""
        generator = DocumentGenerator()

        payload = generator.to_xml(generator.generate([_record(contents="Café ✓")]))

        assert payload.startswith(b'<?xml version="1.0" encoding="utf-8"?>')
        assert "Café ✓".encode() in payload

    def test_empty_record_elements_present(self) -> None:
        """Test that empty contents, annotations and meta are emitted, not omitted."""
        generator = DocumentGenerator()

        root = _parse(generator.to_xml(generator.generate([_record(contents="")])))
        decision = root.find("d:architecturalDecision", NS)

        contents = decision.find("d:contents", NS)
        annotations = decision.find("d:codeAnnotations", NS)
        meta = decision.find("d:meta", NS)
        assert contents is not None and (contents.text or "") == ""
        assert annotations is not None and len(annotations) == 0
        assert meta is not None and len(meta) == 0
        assert decision.get("title") is None

    def test_empty_document(self) -> None:
        """Test that no records still yields a valid root element."""
        generator = DocumentGenerator()

        root = _parse(generator.to_xml(generator.generate([])))

        assert len(root) == 0

    def test_contents_as_cdata(self) -> None:
        """Test that markup characters in contents are carried in a CDATA section."""
        text = 'Use <cache> & "quotes"\n  indented line'
        generator = DocumentGenerator()

        payload = generator.to_xml(generator.generate([_record(contents=text)]))

        assert f"<![CDATA[{text}]]>".encode() in payload
        assert _parse(payload).findtext("d:architecturalDecision/d:contents", namespaces=NS) == text

    def test_contents_with_cdata_terminator(self) -> None:
        """Test that contents containing ]]> are escaped instead and round-trip."""
        text = "Arrays like a[b[0]]> c need <escaping> & care"
        generator = DocumentGenerator()

        payload = generator.to_xml(generator.generate([_record(contents=text)]))

        assert b"<![CDATA[" not in payload
        assert _parse(payload).findtext("d:architecturalDecision/d:contents", namespaces=NS) == text

    @pytest.mark.parametrize(
        "text",
        ["line one\r\nline two <&>", "carriage\ronly", "both ]]> and\r\n"],
    )
    def test_carriage_returns_preserved(self, text: str) -> None:
        """Test that carriage returns are written as references and round-trip."""
        generator = DocumentGenerator()

        payload = generator.to_xml(generator.generate([_record(contents=text)]))

        assert b"\r" not in payload
        assert b"&#13;" in payload
        assert _parse(payload).findtext("d:architecturalDecision/d:contents", namespaces=NS) == text

    def test_carriage_returns_in_status_and_meta(self) -> None:
        """Test that text elements other than contents keep carriage returns."""
        record = _record(
            status="Accepted\r\n",
            metadata=[MetaEntry(name="note", value="a\rb")],
        )
        generator = DocumentGenerator()

        decision = _parse(generator.to_xml(generator.generate([record]))).find(
            "d:architecturalDecision", NS
        )

        assert decision.findtext("d:status", namespaces=NS) == "Accepted\r\n"
        assert decision.findtext("d:meta/d:entry", namespaces=NS) == "a\rb"

    def test_attributes_escaped(self) -> None:
        """Test that identifiers, titles and statuses are escaped."""
        record = _record(
            "odd&<id>",
            qualified_name="app.decisions.Odd",
            title='Say "no" & <mean it>',
            status="Accepted & <final>",
        )
        generator = DocumentGenerator()

        decision = _parse(generator.to_xml(generator.generate([record]))).find(
            "d:architecturalDecision", NS
        )

        assert decision.get("id") == "odd&<id>"
        assert decision.get("title") == 'Say "no" & <mean it>'
        assert decision.findtext("d:status", namespaces=NS) == "Accepted & <final>"

    def test_nested_metadata(self) -> None:
        """Test that nested metadata entries become nested entry elements."""
        record = _record(
            metadata=MetaEntry.from_mapping(
                {"review": {"by": "alice", "links": ["#1", "#2"]}, "superseded_by": None}
            )
        )
        generator = DocumentGenerator()

        meta = _parse(generator.to_xml(generator.generate([record]))).find(
            "d:architecturalDecision/d:meta", NS
        )

        review, superseded = meta.findall("d:entry", NS)
        assert review.get("name") == "review"
        assert review.find("d:entry[@name='by']", NS).text == "alice"
        assert [e.text for e in review.findall("d:entry[@name='links']/d:entry", NS)] == [
            "#1",
            "#2",
        ]
        assert superseded.get("name") == "superseded_by"
        assert superseded.text is None or superseded.text.strip() == ""

    def test_meta_writers(self) -> None:
        """Test that meta writers can append arbitrary nodes per record."""

        def source_writer(record: DecisionRecord, meta: minidom.Element, doc: minidom.Document) -> None:
            element = doc.createElement("source")
            element.setAttribute("file", record.source.path)
            element.appendChild(doc.createTextNode(str(record.source.line)))
            meta.appendChild(element)

        generator = DocumentGenerator(meta_writers=[source_writer])
        generator.add_meta_writer(
            lambda record, meta, doc: meta.appendChild(doc.createComment(record.identifier))
        )

        payload = generator.to_xml(generator.generate([_record()]))
        meta = _parse(payload).find("d:architecturalDecision/d:meta", NS)

        source = meta.find("d:source", NS)
        assert source is not None
        assert source.get("file") == "app/decisions.py"
        assert source.text == "4"
        assert b"<!--use-sqlite-->" in payload

    def test_timestamp_attribute(self) -> None:
        """Test that the generated attribute is emitted only when enabled."""
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        generator = DocumentGenerator(include_timestamp=True, clock=lambda: moment)

        root = _parse(generator.to_xml(generator.generate([])))

        assert root.get("generated") == "2024-01-02T03:04:05+00:00"

    def test_custom_namespace(self) -> None:
        """Test that the namespace is configurable."""
        generator = DocumentGenerator(namespace="urn:example:decisions")

        root = _parse(generator.to_xml(generator.generate([])))

        assert root.tag == "{urn:example:decisions}architecturalDecisions"

    def test_deterministic(self) -> None:
        """Test that the same records render to identical bytes."""
        generator = DocumentGenerator()
        document = generator.generate([_record(), _record("use-redis")])

        assert generator.to_xml(document) == generator.to_xml(document)

    @pytest.mark.parametrize("field", ["contents", "title", "date"])
    def test_invalid_characters_rejected(self, field: str) -> None:
        """Test that characters XML cannot carry raise DocumentGenerationError."""
        generator = DocumentGenerator()
        document = generator.generate([_record(**{field: "bell\x07"})])

        with pytest.raises(DocumentGenerationError, match="U\\+0007"):
            generator.to_xml(document)


class TestSave:
    """Tests for DocumentGenerator.save."""

    def test_save_writes_serialized_document(self, tmp_path: Path) -> None:
        """Test that save writes exactly the serialized bytes."""
        generator = DocumentGenerator()
        document = generator.generate([_record()])
        target = tmp_path / "out" / "architectural-decisions.xml"

        written = generator.save(document, target)

        assert written == target
        assert target.read_bytes() == generator.to_xml(document)

    def test_invalid_document_leaves_existing_file(self, tmp_path: Path) -> None:
        """Test that a serialization failure does not touch the destination."""
        target = tmp_path / "architectural-decisions.xml"
        target.write_bytes(b"previous")
        generator = DocumentGenerator()
        document = generator.generate([_record(contents="\x00")])

        with pytest.raises(DocumentGenerationError):
            generator.save(document, target)

        assert target.read_bytes() == b"previous"
