"""Constants for rule scopes, severities, and rule-set documents."""

from __future__ import annotations

UNIVERSAL_SCOPE: str = "common"

SEVERITY_INFO: str = "info"
SEVERITY_WARNING: str = "warning"
SEVERITY_ERROR: str = "error"

VALID_SEVERITIES: frozenset[str] = frozenset({SEVERITY_INFO, SEVERITY_WARNING, SEVERITY_ERROR})
SEVERITY_RANK: dict[str, int] = {SEVERITY_INFO: 0, SEVERITY_WARNING: 1, SEVERITY_ERROR: 2}

DEFAULT_CATEGORY: str = "general"
DEFAULT_RULE_SET_VERSION: int = 1

REQUIRED_RULE_SET_KEYS: frozenset[str] = frozenset({"name", "scope", "rules"})
ALLOWED_RULE_SET_KEYS: frozenset[str] = REQUIRED_RULE_SET_KEYS | {"version", "description"}

REQUIRED_RULE_KEYS: frozenset[str] = frozenset({"id", "severity", "predicate", "message"})
ALLOWED_RULE_KEYS: frozenset[str] = REQUIRED_RULE_KEYS | {"category", "rationale"}

RULE_SET_SUFFIXES: tuple[str, ...] = (".yaml", ".yml")

# Findings that do not come from a policy rule carry these reserved ids.
PARSE_ERROR_RULE_ID: str = "ordinance/parse-error"

MARKER_VIOLATION: str = "violation"
MARKER_RULE_EVALUATION_ERROR: str = "rule-evaluation-error"
MARKER_PARSE_ERROR: str = "parse-error"
VALID_MARKERS: frozenset[str] = frozenset(
    {MARKER_VIOLATION, MARKER_RULE_EVALUATION_ERROR, MARKER_PARSE_ERROR}
)

ERROR_KIND_PARSE: str = "parse-error"
ERROR_KIND_RULE_EVALUATION: str = "rule-evaluation-error"
ERROR_KIND_CANCELLED: str = "cancelled"
