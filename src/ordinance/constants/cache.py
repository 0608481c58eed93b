"""Constants used by the findings cache and hashing."""

from __future__ import annotations

CACHE_VERSION: int = 1
CACHE_FILENAME: str = ".ordinance-cache.json"
CACHE_TEMP_PREFIX: str = ".cache-"
CACHE_TEMP_SUFFIX: str = ".tmp"
DEFAULT_CACHE_SIZE: int = 4096
