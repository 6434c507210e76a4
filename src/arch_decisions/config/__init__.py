"""Configuration module.

This module provides centralized settings via pydantic-settings and the
loader for optional YAML project configuration files.
"""

from arch_decisions.config.exceptions import ConfigurationError
from arch_decisions.config.loader import ProjectConfig, apply_overrides, load_config
from arch_decisions.config.settings import (
    DiscoverySettings,
    DocumentSettings,
    Settings,
    get_settings,
)

__all__ = [
    "apply_overrides",
    "ConfigurationError",
    "DiscoverySettings",
    "DocumentSettings",
    "get_settings",
    "load_config",
    "ProjectConfig",
    "Settings",
]
