"""Rule model: immutable rules, rule sets, and registry rejections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ordinance.constants.rules import UNIVERSAL_SCOPE

if TYPE_CHECKING:
    from ordinance.predicates import UnitPredicate


@dataclass(frozen=True)
class Rule:
    """A single coding-convention rule.

    ``predicate`` is ``None`` only when the source document declared an
    empty predicate; the registry refuses such rules.
    """

    id: str
    scope: str
    severity: str
    predicate: UnitPredicate | None
    message: str
    category: str = "general"
    rationale: str = ""
    rule_set: str = ""

    @property
    def is_universal(self) -> bool:
        return self.scope == UNIVERSAL_SCOPE

    def signature(self) -> dict[str, object]:
        """Content used for policy fingerprints."""
        return {
            "id": self.id,
            "scope": self.scope,
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "rationale": self.rationale,
            "rule_set": self.rule_set,
            "predicate": self.predicate.describe() if self.predicate is not None else None,
        }


@dataclass(frozen=True)
class RuleSet:
    """A named, versioned, ordered collection of rules sharing one scope."""

    name: str
    scope: str
    rules: tuple[Rule, ...]
    version: int = 1
    description: str = ""
    source_path: str = ""

    @property
    def is_universal(self) -> bool:
        return self.scope == UNIVERSAL_SCOPE

    def signature(self) -> dict[str, object]:
        return {
            "name": self.name,
            "scope": self.scope,
            "version": self.version,
            "rules": [rule.signature() for rule in self.rules],
        }


@dataclass(frozen=True)
class RuleRejection:
    """A universal rule left out of one language's policy for lack of capabilities."""

    rule_id: str
    language: str
    missing: tuple[str, ...]

    def describe(self) -> str:
        return f"{self.rule_id} not evaluated for {self.language} (missing: {', '.join(self.missing)})"
