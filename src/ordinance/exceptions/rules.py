"""Rule loading and registry build exceptions."""

from __future__ import annotations

from ordinance.exceptions.base import OrdinanceError


class RuleLoadError(OrdinanceError, ValueError):
    """Raised when rule sets cannot form a valid policy.

    Fatal: no file is evaluated once this is raised.
    """

    def __init__(self, message: str, *, rule_id: str | None = None, rule_set: str | None = None) -> None:
        super().__init__(message)
        self.rule_id = rule_id
        self.rule_set = rule_set


class RuleSetSchemaError(RuleLoadError):
    """Raised when a rule-set document fails schema validation."""


class PredicateError(RuleSetSchemaError):
    """Raised when a predicate expression cannot be compiled."""
