"""Stable validation error codes for rule-set documents."""

from __future__ import annotations

RULE001: str = "RULE001"  # rule-set file or directory not found / unreadable
RULE002: str = "RULE002"  # invalid file extension
RULE003: str = "RULE003"  # invalid YAML parse
RULE004: str = "RULE004"  # value is not a mapping / list where one is required
RULE005: str = "RULE005"  # unknown key
RULE006: str = "RULE006"  # missing required field
RULE007: str = "RULE007"  # invalid value / enum
RULE008: str = "RULE008"  # duplicate rule id or rule-set name
RULE009: str = "RULE009"  # invalid predicate expression
