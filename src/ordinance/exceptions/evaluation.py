"""Rule evaluation exceptions."""

from __future__ import annotations

from ordinance.exceptions.base import OrdinanceError


class RuleEvaluationError(OrdinanceError, RuntimeError):
    """Raised when a predicate cannot be evaluated against a node.

    The matcher attaches the rule and file before reporting it.
    """

    def __init__(self, reason: str, *, rule_id: str = "", file: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.rule_id = rule_id
        self.file = file

    def attach(self, *, rule_id: str, file: str) -> RuleEvaluationError:
        """Return a copy bound to a rule and file."""
        return RuleEvaluationError(self.reason, rule_id=rule_id, file=file)
