"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "ordinance.yaml"
DEFAULT_MAX_FILE_MB: int = 2
DEFAULT_WORKERS: int = 1
DEFAULT_FAIL_ON: str = "error"

DEFAULT_INCLUDE_GLOBS: tuple[str, ...] = ("**/*.java", "**/*.py", "**/*.pyi")
DEFAULT_EXCLUDE_GLOBS: tuple[str, ...] = (
    "**/.git/**",
    "**/.venv/**",
    "**/node_modules/**",
    "**/build/**",
    "**/target/**",
    "**/__pycache__/**",
)

# Precedence used when only the bundled rule sets are loaded.
BUNDLED_PRECEDENCE: tuple[str, ...] = ("common", "java", "python")

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "rules_dirs",
        "precedence",
        "include",
        "exclude",
        "max_file_mb",
        "workers",
        "cache_size",
        "first_party",
        "fail_on",
    }
)
