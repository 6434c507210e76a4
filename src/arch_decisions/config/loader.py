"""YAML configuration loader.

This module loads an optional project configuration file listing the root
directories to scan, the output path and overrides for discovery and
document settings:

    roots:
      - src
      - plugins
    output: architectural-decisions.xml
    discovery:
      unconstructible: fail
      exclude_patterns: [".venv", "migrations"]
    document:
      include_timestamp: true

Relative paths are resolved against the directory holding the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError

from arch_decisions.config.exceptions import ConfigurationError
from arch_decisions.config.settings import DiscoverySettings, DocumentSettings, Settings
from arch_decisions.logging_config import get_logger
from arch_decisions.models.base import BaseSchema

__all__ = ["ProjectConfig", "apply_overrides", "load_config"]

logger = get_logger(__name__)


class ProjectConfig(BaseSchema):
    """Contents of a project configuration file.

    Attributes:
        roots: Root directories to scan.
        output: Path of the generated document.
        discovery: Overrides for DiscoverySettings fields.
        document: Overrides for DocumentSettings fields.

    """

    roots: list[Path] = Field(default_factory=list)
    output: Path | None = None
    discovery: dict[str, Any] = Field(default_factory=dict)
    document: dict[str, Any] = Field(default_factory=dict)


def load_config(path: Path | str) -> ProjectConfig:
    """Load and validate a project configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        ProjectConfig with paths resolved against the file's directory.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or
            contains unknown or invalid fields.

    """
    path = Path(path)

    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid config file {path}: expected a mapping, got {type(data).__name__}"
        )

    unknown = sorted(set(data) - set(ProjectConfig.model_fields))
    if unknown:
        raise ConfigurationError(f"Unknown keys in {path}: {', '.join(unknown)}")

    try:
        config = ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    _check_override_keys(path, "discovery", config.discovery, DiscoverySettings)
    _check_override_keys(path, "document", config.document, DocumentSettings)

    base_dir = path.parent
    roots = [root if root.is_absolute() else base_dir / root for root in config.roots]
    output = config.output
    if output is not None and not output.is_absolute():
        output = base_dir / output

    logger.debug("config_loaded", path=str(path), roots=[str(r) for r in roots])

    return config.model_copy(update={"roots": roots, "output": output})


def apply_overrides(
    settings: Settings,
    discovery: dict[str, Any] | None = None,
    document: dict[str, Any] | None = None,
) -> Settings:
    """Return a copy of ``settings`` with the given field overrides applied.

    Args:
        settings: Base settings, usually from get_settings().
        discovery: DiscoverySettings fields to override.
        document: DocumentSettings fields to override.

    Returns:
        A new, validated Settings instance.

    Raises:
        ConfigurationError: If an override value is invalid.

    """
    try:
        return Settings(
            discovery=DiscoverySettings(
                **{**settings.discovery.model_dump(), **(discovery or {})}
            ),
            document=DocumentSettings(
                **{**settings.document.model_dump(), **(document or {})}
            ),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def _check_override_keys(
    path: Path,
    section: str,
    overrides: dict[str, Any],
    settings_type: type[DiscoverySettings] | type[DocumentSettings],
) -> None:
    unknown = sorted(set(overrides) - set(settings_type.model_fields))
    if unknown:
        raise ConfigurationError(
            f"Unknown {section} settings in {path}: {', '.join(unknown)}"
        )
