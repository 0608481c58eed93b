"""Schema checks for rule-set documents.

``collect_rule_set_errors`` reports every problem in one pass for the
``validate-rules`` command. ``validate_rule_set`` is the fail-fast form the
loader uses: any problem raises ``RuleSetSchemaError``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ordinance.constants.rules import (
    ALLOWED_RULE_KEYS,
    ALLOWED_RULE_SET_KEYS,
    REQUIRED_RULE_KEYS,
    REQUIRED_RULE_SET_KEYS,
    VALID_SEVERITIES,
)
from ordinance.constants.validation import RULE004, RULE005, RULE006, RULE007, RULE008, RULE009
from ordinance.exceptions import PredicateError, RuleSetSchemaError
from ordinance.exceptions.validation import ValidationError, format_errors
from ordinance.predicates import compile_predicate


def validate_rule_set(data: Any, source_path: str) -> None:
    """Raise ``RuleSetSchemaError`` listing every problem in *data*."""
    errors = collect_rule_set_errors(data, source_path)
    if errors:
        name = data.get("name") if isinstance(data, dict) else None
        raise RuleSetSchemaError(
            f"{source_path}: invalid rule set\n{format_errors(errors)}",
            rule_set=name if isinstance(name, str) else None,
        )


def collect_rule_set_errors(data: Any, source_path: str) -> list[ValidationError]:
    errors: list[ValidationError] = []

    def add(code: str, field: str, message: str, hint: str = "") -> None:
        errors.append(ValidationError(code=code, path=source_path, field=field, message=message, hint=hint))

    if not isinstance(data, dict):
        add(RULE004, "", f"rule set must be a mapping, got {type(data).__name__}")
        return errors

    for key in sorted(set(data) - ALLOWED_RULE_SET_KEYS):
        add(RULE005, str(key), f"unknown top-level key `{key}`")
    for key in sorted(REQUIRED_RULE_SET_KEYS - set(data)):
        add(RULE006, key, f"missing required field `{key}`")

    for key in ("name", "scope"):
        if key in data and not _non_empty_string(data[key]):
            add(RULE007, key, f"`{key}` must be a non-empty string")
    if "scope" in data and _non_empty_string(data["scope"]) and data["scope"] != data["scope"].strip().lower():
        add(RULE007, "scope", "`scope` must be a lowercase language tag or `common`")

    if "version" in data:
        version = data["version"]
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            add(RULE007, "version", f"`version` must be a positive integer, got {version!r}")

    if "description" in data and not isinstance(data["description"], str):
        add(RULE007, "description", "`description` must be a string")

    if "rules" in data:
        rules = data["rules"]
        if not isinstance(rules, list):
            add(RULE004, "rules", f"`rules` must be a list, got {type(rules).__name__}")
        else:
            seen_ids: set[str] = set()
            for index, rule in enumerate(rules):
                _collect_rule_errors(rule, f"rules[{index}]", seen_ids, add)

    return errors


def _collect_rule_errors(rule: Any, field: str, seen_ids: set[str], add: Callable[..., None]) -> None:
    if not isinstance(rule, dict):
        add(RULE004, field, f"rule must be a mapping, got {type(rule).__name__}")
        return

    for key in sorted(set(rule) - ALLOWED_RULE_KEYS):
        add(RULE005, f"{field}.{key}", f"unknown rule key `{key}`")
    for key in sorted(REQUIRED_RULE_KEYS - set(rule)):
        add(RULE006, f"{field}.{key}", f"missing required field `{key}`")

    rule_id = rule.get("id")
    if "id" in rule:
        if not _non_empty_string(rule_id):
            add(RULE007, f"{field}.id", "`id` must be a non-empty string")
        elif rule_id in seen_ids:
            add(RULE008, f"{field}.id", f"duplicate rule id `{rule_id}` in rule set")
        else:
            seen_ids.add(rule_id)

    if "severity" in rule and rule["severity"] not in VALID_SEVERITIES:
        add(
            RULE007,
            f"{field}.severity",
            f"`severity` must be one of {sorted(VALID_SEVERITIES)}, got {rule['severity']!r}",
        )
    if "message" in rule and not _non_empty_string(rule["message"]):
        add(RULE007, f"{field}.message", "`message` must be a non-empty string")
    for key in ("category", "rationale"):
        if key in rule and not isinstance(rule[key], str):
            add(RULE007, f"{field}.{key}", f"`{key}` must be a string")

    if "predicate" in rule:
        try:
            predicate = compile_predicate(rule["predicate"], path=f"{field}.predicate")
        except PredicateError as exc:
            add(RULE009, f"{field}.predicate", str(exc))
        else:
            if predicate is None:
                add(
                    RULE009,
                    f"{field}.predicate",
                    "predicate must not be empty",
                    hint="use one of every, at_least_one, order, all, any, not",
                )


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
