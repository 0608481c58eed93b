"""Matcher engine: evaluate an effective policy against one structural unit."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ordinance.constants.rules import (
    ERROR_KIND_RULE_EVALUATION,
    MARKER_RULE_EVALUATION_ERROR,
    MARKER_VIOLATION,
    SEVERITY_ERROR,
)
from ordinance.exceptions import RuleEvaluationError
from ordinance.model import ErrorRecord, Finding, Rule, StructuralUnit
from ordinance.model.findings import sort_findings
from ordinance.predicates import Violation
from ordinance.registry import EffectivePolicy

from .messages import render_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileMatch:
    """Findings and isolated rule errors for one file, findings sorted by position."""

    findings: tuple[Finding, ...]
    errors: tuple[ErrorRecord, ...] = ()


class MatcherEngine:
    """Evaluates every rule of a policy independently against a unit.

    A rule that fails to evaluate is reported as an error record plus a
    marker finding; the remaining rules still run.
    """

    def evaluate(self, unit: StructuralUnit, policy: EffectivePolicy) -> FileMatch:
        findings: list[Finding] = []
        errors: list[ErrorRecord] = []
        for rule in policy.rules:
            try:
                violations = self._violations(rule, unit)
            except RuleEvaluationError as exc:
                failure = exc.attach(rule_id=rule.id, file=unit.file)
            except Exception as exc:
                failure = RuleEvaluationError(f"{type(exc).__name__}: {exc}", rule_id=rule.id, file=unit.file)
            else:
                findings.extend(self._finding(rule, unit, violation) for violation in violations)
                continue

            logger.warning("Rule %s failed on %s: %s", rule.id, unit.file, failure.reason)
            errors.append(
                ErrorRecord(
                    kind=ERROR_KIND_RULE_EVALUATION,
                    file=unit.file,
                    reason=failure.reason,
                    rule_id=rule.id,
                )
            )
            findings.append(
                Finding(
                    rule_id=rule.id,
                    file=unit.file,
                    span=unit.span,
                    severity=SEVERITY_ERROR,
                    message=f"Rule {rule.id} could not be evaluated: {failure.reason}",
                    category=rule.category,
                    marker=MARKER_RULE_EVALUATION_ERROR,
                )
            )
        return FileMatch(findings=sort_findings(findings), errors=tuple(errors))

    @staticmethod
    def _violations(rule: Rule, unit: StructuralUnit) -> list[Violation]:
        if rule.predicate is None:
            raise RuleEvaluationError("rule has no predicate")
        return rule.predicate.violations(unit)

    @staticmethod
    def _finding(rule: Rule, unit: StructuralUnit, violation: Violation) -> Finding:
        return Finding(
            rule_id=rule.id,
            file=unit.file,
            span=violation.span,
            severity=rule.severity,  # type: ignore[arg-type]
            message=render_message(
                rule.message,
                rule_id=rule.id,
                file=unit.file,
                span=violation.span,
                node=violation.node,
            ),
            category=rule.category,
            marker=MARKER_VIOLATION,
        )
