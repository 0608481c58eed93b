"""Cross-module type aliases."""

from __future__ import annotations

from typing import Literal, TypeAlias

Severity: TypeAlias = Literal["info", "warning", "error"]
Marker: TypeAlias = Literal["violation", "rule-evaluation-error", "parse-error"]

AttributeValue: TypeAlias = str | int | bool | tuple[str, ...] | None

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]
