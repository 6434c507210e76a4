"""Default configuration values for arch-decisions.

This module centralizes all hard-coded default values used throughout
the application, making them easy to discover and modify.
"""

# Output
DEFAULT_OUTPUT_FILENAME = "architectural-decisions.xml"
DEFAULT_NAMESPACE = "urn:arch-decisions:architectural-decisions:1"

# Discovery
DEFAULT_MAX_WORKERS = 4
DEFAULT_EXCLUDE_PATTERNS = [
    ".git",
    ".hg",
    ".tox",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
    "build",
    "dist",
]
DEFAULT_DECISION_BASES = [
    "arch_decisions.ArchitecturalDecision",
    "arch_decisions.declarations.ArchitecturalDecision",
]
DEFAULT_DOCUMENTED_BASES = [
    "arch_decisions.DocumentedDecision",
    "arch_decisions.declarations.DocumentedDecision",
]

# Validation ranges
MAX_WORKERS_MIN = 1
MAX_WORKERS_MAX = 64
