"""Build effective policies from scoped rule sets.

Conflict resolution is a pure function of rule-set scope and the explicit
precedence list: a language-scoped rule beats a universal rule with the
same id, and among equally specific rules the one whose rule set appears
later in the precedence list wins.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections.abc import Sequence

from ordinance.adapters import AdapterRegistry, LanguageAdapter, default_adapters
from ordinance.constants.rules import VALID_SEVERITIES
from ordinance.exceptions import RuleLoadError
from ordinance.model import Rule, RuleRejection, RuleSet
from ordinance.predicates import required_capabilities

from .policy import EffectivePolicy, PolicyBundle

logger = logging.getLogger(__name__)


def input_fingerprint(
    rule_sets: Sequence[RuleSet],
    precedence: Sequence[str],
    adapters: AdapterRegistry | None = None,
) -> str:
    """Stable hash of rule-set contents, precedence and adapter settings."""
    payload = {
        "adapters": adapters.signature() if adapters is not None else {},
        "precedence": list(precedence),
        "rule_sets": sorted((rule_set.signature() for rule_set in rule_sets), key=lambda item: str(item["name"])),
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


def _missing_capabilities(adapter: LanguageAdapter | None, rule: Rule) -> tuple[str, ...]:
    if adapter is None or rule.predicate is None:
        return ()
    return adapter.missing_capabilities(required_capabilities(rule.predicate))


class RuleRegistry:
    """Validates rule sets and resolves them into per-language policies.

    The registry remembers the fingerprint of its last build; a build with
    different input bumps the policy version, an identical rebuild keeps it.
    """

    def __init__(self, adapters: AdapterRegistry | None = None) -> None:
        self._adapters = adapters if adapters is not None else default_adapters()
        self._version = 0
        self._last_fingerprint: str | None = None
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    @property
    def adapters(self) -> AdapterRegistry:
        return self._adapters

    def build(self, rule_sets: Sequence[RuleSet], precedence: Sequence[str]) -> PolicyBundle:
        """Validate *rule_sets* and return the resolved ``PolicyBundle``.

        Raises ``RuleLoadError`` on any structural problem; nothing is
        evaluated against a partially built policy.
        """
        self._validate(rule_sets, precedence)

        fingerprint = input_fingerprint(rule_sets, precedence, self._adapters)
        with self._lock:
            if fingerprint != self._last_fingerprint:
                self._version += 1
                self._last_fingerprint = fingerprint
                logger.debug("Policy version bumped to %d", self._version)
            version = self._version

        rank = {name: index for index, name in enumerate(precedence)}
        ordered = sorted(rule_sets, key=lambda rule_set: rank[rule_set.name])

        policies: dict[str, EffectivePolicy] = {}
        rejections: list[RuleRejection] = []
        for language in self._adapters.registered_languages():
            rules, rejected = self._resolve_language(language, ordered, rank)
            policies[language] = EffectivePolicy(language=language, version=version, rules=rules)
            rejections.extend(rejected)
            logger.debug("Policy for %s: %d rules, %d rejected", language, len(rules), len(rejected))

        return PolicyBundle(
            policies=policies,
            version=version,
            fingerprint=fingerprint,
            rejections=tuple(rejections),
        )

    def _resolve_language(
        self,
        language: str,
        ordered: Sequence[RuleSet],
        rank: dict[str, int],
    ) -> tuple[tuple[Rule, ...], list[RuleRejection]]:
        winners: dict[str, tuple[tuple[int, int], Rule]] = {}
        for rule_set in ordered:
            if not rule_set.is_universal and rule_set.scope != language:
                continue
            precedence_key = (0 if rule_set.is_universal else 1, rank[rule_set.name])
            for rule in rule_set.rules:
                current = winners.get(rule.id)
                if current is None or precedence_key > current[0]:
                    winners[rule.id] = (precedence_key, rule)

        adapter = self._adapters.get_adapter(language)
        selected: list[Rule] = []
        rejected: list[RuleRejection] = []
        for rule_id in sorted(winners):
            rule = winners[rule_id][1]
            missing = _missing_capabilities(adapter, rule)
            if missing:
                # Only universal rules reach here; language-scoped ones fail in _validate.
                rejection = RuleRejection(rule_id=rule.id, language=language, missing=missing)
                logger.warning("Rule rejected: %s", rejection.describe())
                rejected.append(rejection)
                continue
            selected.append(rule)
        return tuple(selected), rejected

    def _validate(self, rule_sets: Sequence[RuleSet], precedence: Sequence[str]) -> None:
        names: set[str] = set()
        for rule_set in rule_sets:
            if rule_set.name in names:
                raise RuleLoadError(f"duplicate rule-set name '{rule_set.name}'", rule_set=rule_set.name)
            names.add(rule_set.name)

        seen_precedence: set[str] = set()
        for name in precedence:
            if name in seen_precedence:
                raise RuleLoadError(f"rule set '{name}' appears more than once in precedence", rule_set=name)
            if name not in names:
                raise RuleLoadError(f"precedence names unknown rule set '{name}'", rule_set=name)
            seen_precedence.add(name)
        unlisted = sorted(names - seen_precedence)
        if unlisted:
            raise RuleLoadError(f"rule set '{unlisted[0]}' is missing from precedence", rule_set=unlisted[0])

        for rule_set in rule_sets:
            adapter: LanguageAdapter | None = None
            if not rule_set.is_universal:
                adapter = self._adapters.get_adapter(rule_set.scope)
                if adapter is None:
                    raise RuleLoadError(
                        f"rule set '{rule_set.name}' targets language '{rule_set.scope}' which has no adapter; "
                        f"registered: {', '.join(self._adapters.registered_languages())}",
                        rule_set=rule_set.name,
                    )

            rule_ids: set[str] = set()
            for rule in rule_set.rules:
                self._validate_rule(rule, rule_set, rule_ids)
                missing = _missing_capabilities(adapter, rule)
                if missing:
                    raise RuleLoadError(
                        f"rule '{rule.id}' in rule set '{rule_set.name}' needs capabilities "
                        f"{', '.join(missing)} that the {rule_set.scope} adapter does not provide",
                        rule_id=rule.id,
                        rule_set=rule_set.name,
                    )

    @staticmethod
    def _validate_rule(rule: Rule, rule_set: RuleSet, rule_ids: set[str]) -> None:
        if not rule.id or not rule.id.strip():
            raise RuleLoadError(f"rule set '{rule_set.name}' has a rule with an empty id", rule_set=rule_set.name)
        if rule.id in rule_ids:
            raise RuleLoadError(
                f"duplicate rule id '{rule.id}' in rule set '{rule_set.name}'",
                rule_id=rule.id,
                rule_set=rule_set.name,
            )
        rule_ids.add(rule.id)
        if rule.predicate is None:
            raise RuleLoadError(
                f"rule '{rule.id}' in rule set '{rule_set.name}' has an empty predicate",
                rule_id=rule.id,
                rule_set=rule_set.name,
            )
        if rule.severity not in VALID_SEVERITIES:
            raise RuleLoadError(
                f"rule '{rule.id}' in rule set '{rule_set.name}' has invalid severity {rule.severity!r}; "
                f"expected one of {sorted(VALID_SEVERITIES)}",
                rule_id=rule.id,
                rule_set=rule_set.name,
            )
