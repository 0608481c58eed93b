"""Resolved engine configuration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ordinance.constants.cache import DEFAULT_CACHE_SIZE
from ordinance.constants.config import (
    BUNDLED_PRECEDENCE,
    DEFAULT_EXCLUDE_GLOBS,
    DEFAULT_FAIL_ON,
    DEFAULT_INCLUDE_GLOBS,
    DEFAULT_MAX_FILE_MB,
    DEFAULT_WORKERS,
)


@dataclass(frozen=True)
class OrdinanceConfig:
    """Settings from ``ordinance.yaml`` merged with defaults."""

    rules_dirs: tuple[Path, ...] = ()
    precedence: tuple[str, ...] | None = None
    include: tuple[str, ...] = DEFAULT_INCLUDE_GLOBS
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS
    max_file_mb: int = DEFAULT_MAX_FILE_MB
    workers: int = DEFAULT_WORKERS
    cache_size: int = DEFAULT_CACHE_SIZE
    first_party: tuple[str, ...] = ()
    fail_on: str = DEFAULT_FAIL_ON

    def effective_precedence(self, rule_set_names: Iterable[str]) -> tuple[str, ...]:
        """Precedence for the loaded rule sets.

        An explicit ``precedence`` is used as written. Otherwise the bundled
        sets come first in their fixed order, followed by custom sets sorted
        by name, so custom rules win ties against bundled ones.
        """
        if self.precedence is not None:
            return self.precedence
        names = set(rule_set_names)
        bundled = [name for name in BUNDLED_PRECEDENCE if name in names]
        custom = sorted(names - set(BUNDLED_PRECEDENCE))
        return (*bundled, *custom)
