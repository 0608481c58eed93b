"""Persisted shape of the findings cache."""

from __future__ import annotations

from typing import TypedDict

from ordinance.types.common import JsonObject


class CacheNamespace(TypedDict):
    """Findings persisted for one policy fingerprint, keyed by ``language:sha256``."""

    policy_fingerprint: str
    entries: dict[str, list[JsonObject]]


class CachePayload(TypedDict):
    """Top-level cache payload persisted to disk."""

    version: int
    namespaces: dict[str, CacheNamespace]
