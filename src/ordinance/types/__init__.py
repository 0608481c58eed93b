"""Shared type aliases for Ordinance."""

from .cache import CacheNamespace, CachePayload
from .common import AttributeValue, JsonObject, JsonScalar, JsonValue, Marker, Severity

__all__ = [
    "AttributeValue",
    "CacheNamespace",
    "CachePayload",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "Marker",
    "Severity",
]
