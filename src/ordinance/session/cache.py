"""Bounded findings cache keyed by content hash, policy version and language.

Entries never expire by time: a file's cached findings stay valid exactly as
long as its content and the policy version are unchanged.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import replace
from pathlib import Path
from typing import TypeAlias

from ordinance.constants.cache import CACHE_TEMP_PREFIX, CACHE_TEMP_SUFFIX, CACHE_VERSION, DEFAULT_CACHE_SIZE
from ordinance.io import load_json_object, text_sha256, write_json_atomic
from ordinance.model import Finding
from ordinance.registry import PolicyBundle
from ordinance.types import CacheNamespace, CachePayload, JsonObject

logger = logging.getLogger(__name__)

CacheKey: TypeAlias = tuple[str, int, str]  # (content sha256, policy version, language)


class FindingCache:
    """LRU map from ``CacheKey`` to findings, safe for concurrent workers."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE) -> None:
        if max_entries < 1:
            raise ValueError(f"cache size must be at least 1, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[CacheKey, tuple[Finding, ...]] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: CacheKey) -> tuple[Finding, ...] | None:
        with self._lock:
            findings = self._entries.get(key)
            if findings is not None:
                self._entries.move_to_end(key)
            return findings

    def put(self, key: CacheKey, findings: tuple[Finding, ...]) -> None:
        # Concurrent writers for one key hold equal findings, so last write wins.
        with self._lock:
            self._entries[key] = findings
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def items_for_version(self, version: int) -> list[tuple[CacheKey, tuple[Finding, ...]]]:
        """Entries computed under *version*, least recently used first."""
        with self._lock:
            return [(key, findings) for key, findings in self._entries.items() if key[1] == version]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


def content_key(text: str, path: str, *, path_in_messages: bool) -> str:
    """Hash that identifies cached findings for *text*.

    When messages embed the file path the path is hashed too, so identical
    content in two files never shares an entry.
    """
    if path_in_messages:
        return text_sha256(f"{path}\0{text}")
    return text_sha256(text)


def rebind_findings(findings: tuple[Finding, ...], path: str) -> tuple[Finding, ...]:
    """Point cached findings at *path*; identical content may live in several files."""
    return tuple(
        finding
        if finding.file == path
        else replace(finding, file=path, span=replace(finding.span, file=path))
        for finding in findings
    )


def new_cache() -> CachePayload:
    """Return an empty cache payload."""
    return {
        "version": CACHE_VERSION,
        "namespaces": {},
    }


def load_cache(cache_path: Path) -> CachePayload:
    """Load cache file if valid, otherwise return a new cache payload."""
    if not cache_path.is_file():
        return new_cache()

    try:
        payload = load_json_object(cache_path)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable cache %s: %s", cache_path, exc)
        return new_cache()

    if payload.get("version") != CACHE_VERSION:
        return new_cache()

    raw_namespaces = payload.get("namespaces")
    if not isinstance(raw_namespaces, dict):
        return new_cache()

    namespaces: dict[str, CacheNamespace] = {}
    for key, value in raw_namespaces.items():
        if not isinstance(key, str) or not isinstance(value, dict):
            continue
        entries = value.get("entries")
        if not isinstance(entries, dict):
            continue
        namespaces[key] = {
            "policy_fingerprint": key,
            "entries": {
                entry_key: [item for item in items if isinstance(item, dict)]
                for entry_key, items in entries.items()
                if isinstance(entry_key, str) and isinstance(items, list)
            },
        }
    return {"version": CACHE_VERSION, "namespaces": namespaces}


def save_cache(cache_path: Path, payload: CachePayload) -> None:
    """Persist cache to disk atomically."""
    write_json_atomic(
        path=cache_path,
        payload=payload,
        temp_prefix=CACHE_TEMP_PREFIX,
        temp_suffix=CACHE_TEMP_SUFFIX,
        compact=True,
    )


def load_finding_cache(
    cache_path: Path,
    bundle: PolicyBundle,
    *,
    max_entries: int = DEFAULT_CACHE_SIZE,
) -> FindingCache:
    """Build a ``FindingCache`` from disk.

    Only the namespace written under the bundle's fingerprint is loaded, and
    its entries are mapped onto the bundle's current version.
    """
    cache = FindingCache(max_entries)
    namespace = load_cache(cache_path)["namespaces"].get(bundle.fingerprint)
    if namespace is None:
        return cache

    loaded = 0
    for entry_key, items in namespace["entries"].items():
        language, _, sha256 = entry_key.partition(":")
        if not language or not sha256:
            continue
        findings = [Finding.from_dict(item) for item in items]
        if any(finding is None for finding in findings):
            continue
        cache.put((sha256, bundle.version, language), tuple(f for f in findings if f is not None))
        loaded += 1
    logger.debug("Loaded %d cache entries from %s", loaded, cache_path)
    return cache


def save_finding_cache(cache_path: Path, cache: FindingCache, bundle: PolicyBundle) -> None:
    """Write the bundle's entries into its namespace, keeping other namespaces."""
    payload = load_cache(cache_path)
    entries: dict[str, list[JsonObject]] = {}
    for (sha256, _version, language), findings in cache.items_for_version(bundle.version):
        entries[f"{language}:{sha256}"] = [finding.to_dict() for finding in findings]
    payload["namespaces"][bundle.fingerprint] = {
        "policy_fingerprint": bundle.fingerprint,
        "entries": entries,
    }
    try:
        save_cache(cache_path, payload)
    except OSError as exc:
        logger.warning("Failed to write cache %s: %s", cache_path, exc)
