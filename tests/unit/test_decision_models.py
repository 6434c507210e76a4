"""Unit tests for decision, diagnostic and metadata models."""

import pytest
from pydantic import ValidationError

from arch_decisions.models import (
    DecisionRecord,
    Diagnostic,
    DiagnosticKind,
    MetaEntry,
    ScopeKind,
    SourceLocation,
    UsageSite,
)


def _record(**overrides: object) -> DecisionRecord:
    values: dict[str, object] = {
        "identifier": "use-sqlite",
        "qualified_name": "app.decisions.UseSqlite",
        "date": "2024-01-02",
        "status": "Accepted",
        "contents": "Store the cache in SQLite.",
        "source": SourceLocation(path="app/decisions.py", line=4),
    }
    values.update(overrides)
    return DecisionRecord(**values)


class TestMetaEntry:
    """Tests for MetaEntry.from_literal and from_mapping."""

    def test_scalar_value(self) -> None:
        """Test that scalars become the entry value."""
        assert MetaEntry.from_literal("owner", "platform") == MetaEntry(
            name="owner", value="platform"
        )
        assert MetaEntry.from_literal("priority", 3).value == "3"

    def test_bool_and_none(self) -> None:
        """Test that booleans are lowercase and None carries no value."""
        assert MetaEntry.from_literal("reviewed", True).value == "true"
        assert MetaEntry.from_literal("reviewed", False).value == "false"
        assert MetaEntry.from_literal("supersedes", None) == MetaEntry(name="supersedes")

    def test_sequence_becomes_items(self) -> None:
        """Test that lists become repeated item children."""
        entry = MetaEntry.from_literal("teams", ["core", "infra"])

        assert entry.value is None
        assert [(c.name, c.value) for c in entry.children] == [
            ("item", "core"),
            ("item", "infra"),
        ]

    def test_set_is_sorted(self) -> None:
        """Test that sets are emitted in a stable order."""
        entry = MetaEntry.from_literal("tags", {"b", "a", "c"})

        assert [c.value for c in entry.children] == ["a", "b", "c"]

    def test_mapping_nests(self) -> None:
        """Test that mappings become nested entries in insertion order."""
        entry = MetaEntry.from_literal("review", {"by": "alice", "links": ["#12"]})

        assert [c.name for c in entry.children] == ["by", "links"]
        assert entry.children[1].children[0].value == "#12"

    def test_from_mapping_preserves_order(self) -> None:
        """Test that top-level entries keep declaration order."""
        entries = MetaEntry.from_mapping({"z": 1, "a": 2})

        assert [e.name for e in entries] == ["z", "a"]


class TestDecisionRecord:
    """Tests for DecisionRecord."""

    def test_add_usage(self) -> None:
        """Test that usages of the record are appended in order."""
        record = _record()
        first = UsageSite(
            scope="app.api.handle",
            kind=ScopeKind.function,
            location=SourceLocation(path="app/api.py", line=3),
            decision=record.qualified_name,
        )
        second = first.model_copy(update={"scope": "app.cache.Store"})

        record.add_usage(first)
        record.add_usage(second)

        assert record.usages == [first, second]

    def test_add_usage_rejects_other_decision(self) -> None:
        """Test that a usage of another decision cannot be attached."""
        record = _record()
        usage = UsageSite(
            scope="app.api.handle",
            kind=ScopeKind.function,
            location=SourceLocation(path="app/api.py", line=3),
            decision="app.decisions.Other",
        )

        with pytest.raises(ValueError, match="cannot be added"):
            record.add_usage(usage)

    def test_identity_is_frozen(self) -> None:
        """Test that identity fields cannot be reassigned."""
        record = _record()

        with pytest.raises(ValidationError):
            record.identifier = "other"  # type: ignore[misc]

    def test_empty_contents_allowed(self) -> None:
        """Test that an empty contents string is valid."""
        assert _record(contents="").contents == ""


class TestDiagnostic:
    """Tests for Diagnostic.format."""

    def test_format_with_location(self) -> None:
        """Test that path and line prefix the message."""
        diagnostic = Diagnostic(
            kind=DiagnosticKind.unconstructible,
            message="app.decisions.Needs cannot be instantiated",
            path="app/decisions.py",
            line=12,
        )

        assert diagnostic.format() == (
            "app/decisions.py:12: unconstructible: app.decisions.Needs cannot be instantiated"
        )

    def test_format_without_line(self) -> None:
        """Test that a diagnostic without a line shows only the path."""
        diagnostic = Diagnostic(
            kind=DiagnosticKind.parse_error,
            message="Source is not valid UTF-8",
            path="app/broken.py",
        )

        assert diagnostic.format() == "app/broken.py: parse_error: Source is not valid UTF-8"

    def test_format_without_path(self) -> None:
        """Test that a diagnostic without a path is just kind and message."""
        diagnostic = Diagnostic(kind=DiagnosticKind.parse_error, message="boom")

        assert diagnostic.format() == "parse_error: boom"
