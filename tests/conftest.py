"""Pytest configuration and shared fixtures for the arch-decisions test suite.

This module provides fixtures that build source trees under tmp_path and
parse Python snippets into SourceUnits, plus isolation from any
ARCH_DECISIONS_* variables set in the environment.
"""

import os
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from arch_decisions.config.settings import DiscoverySettings, get_settings
from arch_decisions.models import SourceUnit
from arch_decisions.parsing import SourceParser, SourceUnitExtractor
from arch_decisions.parsing.languages import Language


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests independent of the caller's environment and cached settings."""
    for key in list(os.environ):
        if key.startswith("ARCH_DECISIONS_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[..., Path]:
    """Provide a function writing a source tree under tmp_path.

    The returned function takes a mapping of relative paths to source text
    (dedented before writing) and an optional root directory name, and
    returns the root directory.
    """

    def _write(files: dict[str, str | bytes], root: str = "src") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(textwrap.dedent(content), encoding="utf-8")
        return base

    return _write


@pytest.fixture
def extract_unit() -> Callable[..., SourceUnit]:
    """Provide a function parsing a snippet into a SourceUnit."""
    parser = SourceParser()
    extractor = SourceUnitExtractor()

    def _extract(
        source: str,
        module: str = "app.mod",
        path: str = "app/mod.py",
        is_package: bool = False,
    ) -> SourceUnit:
        parsed = parser.parse(textwrap.dedent(source), language=Language.python)
        assert parsed.success, parsed.error
        return extractor.extract(parsed, path, "/src", module, is_package)

    return _extract


@pytest.fixture
def discovery_settings() -> DiscoverySettings:
    """Provide discovery settings with parallel parsing disabled."""
    return DiscoverySettings(max_workers=1)


@pytest.fixture
def line_of() -> Callable[[str, str], int]:
    """Provide a function returning the 1-based line of ``fragment`` in a snippet."""

    def _line_of(source: str, fragment: str) -> int:
        for number, line in enumerate(textwrap.dedent(source).splitlines(), start=1):
            if fragment in line:
                return number
        raise AssertionError(f"{fragment!r} not found")

    return _line_of


@pytest.fixture
def unreadable_directory(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], None]:
    """Provide a function making os.walk fail to list directories with a given name.

    Permission bits cannot be relied on when tests run as root, so the
    listing failure is reported through os.walk's ``onerror`` callback.
    """
    real_walk = os.walk

    def _install(name: str) -> None:
        def walk(top, onerror=None, **kwargs):
            for directory, dirnames, filenames in real_walk(top, onerror=onerror, **kwargs):
                if Path(directory).name == name:
                    dirnames[:] = []
                    if onerror is not None:
                        onerror(PermissionError(13, "Permission denied", directory))
                    continue
                yield directory, dirnames, filenames

        monkeypatch.setattr(os, "walk", walk)

    return _install
