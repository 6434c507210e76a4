"""Application settings using pydantic-settings.

This module provides environment variable support for configuration
using pydantic-settings. Settings can be overridden via environment
variables with the appropriate prefix.

Environment Variables:
    ARCH_DECISIONS_DISCOVERY_MAX_WORKERS: Parallel parse workers (1 disables the pool)
    ARCH_DECISIONS_DISCOVERY_EXCLUDE_PATTERNS: JSON list of directory patterns to skip
    ARCH_DECISIONS_DISCOVERY_DECISION_BASES: JSON list of decision base classes
    ARCH_DECISIONS_DISCOVERY_DOCUMENTED_BASES: JSON list of docstring-backed bases
    ARCH_DECISIONS_DISCOVERY_UNCONSTRUCTIBLE: skip | fail
    ARCH_DECISIONS_DISCOVERY_PARSE_ERRORS: skip | fail
    ARCH_DECISIONS_DISCOVERY_UNRESOLVED_REFERENCES: ignore | log | fail
    ARCH_DECISIONS_DOCUMENT_OUTPUT_FILENAME: Name of the generated document
    ARCH_DECISIONS_DOCUMENT_NAMESPACE: XML namespace of the document
    ARCH_DECISIONS_DOCUMENT_INCLUDE_TIMESTAMP: Emit a generation timestamp
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arch_decisions.config.defaults import (
    DEFAULT_DECISION_BASES,
    DEFAULT_DOCUMENTED_BASES,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_NAMESPACE,
    DEFAULT_OUTPUT_FILENAME,
    MAX_WORKERS_MAX,
    MAX_WORKERS_MIN,
)
from arch_decisions.models.enums import (
    ConstructionPolicy,
    ParseErrorPolicy,
    ReferencePolicy,
)

__all__ = [
    "DiscoverySettings",
    "DocumentSettings",
    "Settings",
    "get_settings",
]


class DiscoverySettings(BaseSettings):
    """Settings for gathering declarations and locating usages.

    Attributes:
        max_workers: Number of threads parsing files in parallel.
        exclude_patterns: fnmatch patterns for directory names to skip.
        decision_bases: Fully-qualified classes whose subclasses are decisions.
        documented_bases: Decision bases that take contents from the docstring.
        unconstructible: Policy for declarations needing constructor arguments.
        parse_errors: Policy for files that cannot be parsed.
        unresolved_references: Policy for usages naming no gathered decision.

    """

    model_config = SettingsConfigDict(
        env_prefix="ARCH_DECISIONS_DISCOVERY_",
        extra="ignore",
    )

    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=MAX_WORKERS_MIN,
        le=MAX_WORKERS_MAX,
        description="Number of threads parsing files in parallel",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Directory name patterns skipped during traversal",
    )
    decision_bases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DECISION_BASES),
        description="Classes whose subclasses declare decisions",
    )
    documented_bases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOCUMENTED_BASES),
        description="Decision bases deriving contents from the docstring",
    )
    unconstructible: ConstructionPolicy = Field(
        default=ConstructionPolicy.skip,
        description="Policy for declarations that need constructor arguments",
    )
    parse_errors: ParseErrorPolicy = Field(
        default=ParseErrorPolicy.skip,
        description="Policy for source files that cannot be parsed",
    )
    unresolved_references: ReferencePolicy = Field(
        default=ReferencePolicy.log,
        description="Policy for usages that name no gathered decision",
    )


class DocumentSettings(BaseSettings):
    """Settings for the generated document.

    Attributes:
        output_filename: File name used when no output path is given.
        namespace: XML namespace of the document element.
        include_timestamp: Whether to emit a ``generated`` attribute. Off by
            default so unchanged sources produce byte-identical documents.

    """

    model_config = SettingsConfigDict(
        env_prefix="ARCH_DECISIONS_DOCUMENT_",
        extra="ignore",
    )

    output_filename: str = Field(
        default=DEFAULT_OUTPUT_FILENAME,
        min_length=1,
        description="File name of the generated document",
    )
    namespace: str = Field(
        default=DEFAULT_NAMESPACE,
        min_length=1,
        description="XML namespace of the document element",
    )
    include_timestamp: bool = Field(
        default=False,
        description="Emit a generation timestamp on the document element",
    )


class Settings(BaseSettings):
    """Root settings container.

    Use get_settings() to access the cached singleton instance.

    Attributes:
        discovery: Gathering and locating settings.
        document: Output document settings.

    """

    model_config = SettingsConfigDict(
        env_prefix="ARCH_DECISIONS_",
        extra="ignore",
    )

    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    document: DocumentSettings = Field(default_factory=DocumentSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings singleton.

    Returns:
        The Settings instance with values from environment variables.

    """
    return Settings()
