"""Findings, error records, and evaluation reports."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from ordinance.constants.rules import (
    MARKER_VIOLATION,
    SEVERITY_ERROR,
    SEVERITY_RANK,
    VALID_MARKERS,
    VALID_SEVERITIES,
)
from ordinance.model.rules import RuleRejection
from ordinance.model.structure import Span
from ordinance.types import JsonObject, Marker, Severity


@dataclass(frozen=True)
class Finding:
    """One reported rule violation, or one could-not-check marker."""

    rule_id: str
    file: str
    span: Span
    severity: Severity
    message: str
    category: str = "general"
    marker: Marker = "violation"

    @property
    def sort_key(self) -> tuple[int, int, str, str]:
        return (self.span.start_line, self.span.start_column, self.rule_id, self.message)

    @property
    def is_violation(self) -> bool:
        return self.marker == MARKER_VIOLATION

    def to_dict(self) -> JsonObject:
        return {
            "rule_id": self.rule_id,
            "file": self.file,
            "span": self.span.to_dict(),
            "severity": self.severity,
            "message": self.message,
            "category": self.category,
            "marker": self.marker,
        }

    @classmethod
    def from_dict(cls, payload: JsonObject) -> Finding | None:
        """Rebuild a finding from its serialized form, or ``None`` if malformed."""
        rule_id = payload.get("rule_id")
        file = payload.get("file")
        span = payload.get("span")
        severity = payload.get("severity")
        message = payload.get("message")
        category = payload.get("category", "general")
        marker = payload.get("marker", MARKER_VIOLATION)
        if not isinstance(rule_id, str) or not isinstance(file, str) or not isinstance(message, str):
            return None
        if not isinstance(span, dict) or severity not in VALID_SEVERITIES or marker not in VALID_MARKERS:
            return None
        return cls(
            rule_id=rule_id,
            file=file,
            span=Span.from_dict(span),
            severity=severity,  # type: ignore[arg-type]
            message=message,
            category=category if isinstance(category, str) else "general",
            marker=marker,  # type: ignore[arg-type]
        )


def sort_findings(findings: list[Finding]) -> tuple[Finding, ...]:
    """Order findings by source position, then rule id."""
    return tuple(sorted(findings, key=lambda finding: finding.sort_key))


@dataclass(frozen=True)
class ErrorRecord:
    """A file or rule that could not be fully evaluated."""

    kind: str
    file: str
    reason: str
    rule_id: str | None = None

    def to_dict(self) -> JsonObject:
        return {
            "kind": self.kind,
            "file": self.file,
            "rule_id": self.rule_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class FileReport:
    """Outcome for one evaluated file."""

    file: str
    language: str | None
    state: str
    findings: tuple[Finding, ...] = ()
    errors: tuple[ErrorRecord, ...] = ()
    from_cache: bool = False

    def to_dict(self, *, include_stats: bool = True) -> JsonObject:
        payload: JsonObject = {
            "file": self.file,
            "language": self.language,
            "state": self.state,
            "findings": [finding.to_dict() for finding in self.findings],
            "errors": [error.to_dict() for error in self.errors],
        }
        if include_stats:
            payload["from_cache"] = self.from_cache
        return payload


@dataclass(frozen=True)
class EvaluationReport:
    """Aggregated result of one session pass, in input-file order."""

    policy_version: int
    files: tuple[FileReport, ...]
    rejections: tuple[RuleRejection, ...] = ()
    cache_hits: int = 0
    cache_misses: int = 0
    cancelled: bool = False
    duration_seconds: float = 0.0

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(finding for report in self.files for finding in report.findings)

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        return tuple(error for report in self.files for error in report.errors)

    @property
    def counts_by_severity(self) -> dict[str, int]:
        counts = Counter(finding.severity for finding in self.findings)
        return {severity: counts.get(severity, 0) for severity in ("error", "warning", "info")}

    @property
    def counts_by_rule(self) -> dict[str, int]:
        counts = Counter(finding.rule_id for finding in self.findings if finding.is_violation)
        return dict(sorted(counts.items()))

    def findings_for(self, file: str) -> tuple[Finding, ...]:
        for report in self.files:
            if report.file == file:
                return report.findings
        return ()

    def exit_code(self, fail_on: Severity = SEVERITY_ERROR) -> int:
        """Return 1 when any finding reaches *fail_on*, 0 otherwise."""
        threshold = SEVERITY_RANK[fail_on]
        for finding in self.findings:
            if SEVERITY_RANK[finding.severity] >= threshold:
                return 1
        return 0

    def to_dict(self, *, include_stats: bool = True) -> JsonObject:
        payload: JsonObject = {
            "policy_version": self.policy_version,
            "files": [report.to_dict(include_stats=include_stats) for report in self.files],
            "errors": [error.to_dict() for error in self.errors],
            "rejections": [
                {"rule_id": r.rule_id, "language": r.language, "missing": list(r.missing)}
                for r in self.rejections
            ],
            "counts_by_severity": dict(self.counts_by_severity),
            "counts_by_rule": dict(self.counts_by_rule),
            "cancelled": self.cancelled,
        }
        if include_stats:
            payload["stats"] = {
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "duration_seconds": round(self.duration_seconds, 6),
            }
        return payload
