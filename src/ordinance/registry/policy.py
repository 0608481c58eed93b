"""Effective policies: the conflict-resolved rules applied to one language."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field

from ordinance.model import Rule, RuleRejection


@dataclass(frozen=True)
class EffectivePolicy:
    """Rules for one language, ordered by id, each id unique.

    Instances are immutable and shared across evaluation threads.
    """

    language: str
    version: int
    rules: tuple[Rule, ...]
    _by_id: dict[str, Rule] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        by_id: dict[str, Rule] = {}
        for rule in self.rules:
            if rule.id in by_id:
                raise ValueError(f"duplicate rule id '{rule.id}' in {self.language} policy")
            by_id[rule.id] = rule
        object.__setattr__(self, "_by_id", by_id)

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(rule.id for rule in self.rules)

    @property
    def fingerprint(self) -> str:
        """Stable hash of the winning rules' content."""
        payload = [rule.signature() for rule in self.rules]
        blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.sha256(blob).hexdigest()

    def rule(self, rule_id: str) -> Rule | None:
        return self._by_id.get(rule_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id


@dataclass(frozen=True)
class PolicyBundle:
    """Registry build output: one policy per registered language."""

    policies: dict[str, EffectivePolicy] = field(hash=False)
    version: int
    fingerprint: str
    rejections: tuple[RuleRejection, ...] = ()

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(sorted(self.policies))

    def policy_for(self, language: str) -> EffectivePolicy | None:
        return self.policies.get(language)
