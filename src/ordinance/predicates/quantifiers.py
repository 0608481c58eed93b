"""Unit predicates: quantified checks over a whole structural unit.

Each predicate returns the violations it finds. An empty list means the
predicate holds. Absence is never a violation unless the quantifier asks
for at least one node.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ordinance.model import Span, StructuralNode, StructuralUnit
from ordinance.predicates.conditions import NodeCondition
from ordinance.types import JsonValue


@dataclass(frozen=True)
class Violation:
    """Where a predicate failed, and the node it failed on (if any)."""

    span: Span
    node: StructuralNode | None = None


class UnitPredicate(ABC):
    """Quantified check over the nodes of one unit."""

    @abstractmethod
    def violations(self, unit: StructuralUnit) -> list[Violation]:
        """Return the violations found in *unit*; empty when the predicate holds."""

    @abstractmethod
    def conditions(self) -> tuple[NodeCondition, ...]:
        """Node conditions this predicate is built from."""

    @abstractmethod
    def describe(self) -> JsonValue:
        """Canonical, JSON-compatible form used for fingerprints."""

    def kinds(self) -> frozenset[str]:
        return frozenset().union(*(condition.kinds() for condition in self.conditions()))

    def attributes(self) -> frozenset[str]:
        return frozenset().union(*(condition.attributes() for condition in self.conditions()))


def _dedupe(violations: list[Violation]) -> list[Violation]:
    seen: set[tuple[Span, str | None]] = set()
    unique: list[Violation] = []
    for violation in violations:
        key = (violation.span, violation.node.kind if violation.node is not None else None)
        if key in seen:
            continue
        seen.add(key)
        unique.append(violation)
    return unique


@dataclass(frozen=True)
class Every(UnitPredicate):
    """For every node matching ``select``, ``require`` must hold."""

    select: NodeCondition
    require: NodeCondition

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        return [
            Violation(node.span, node)
            for node in unit.nodes
            if self.select.test(node) and not self.require.test(node)
        ]

    def conditions(self) -> tuple[NodeCondition, ...]:
        return (self.select, self.require)

    def describe(self) -> JsonValue:
        return {"every": {"select": self.select.describe(), "require": self.require.describe()}}


@dataclass(frozen=True)
class AtLeastOne(UnitPredicate):
    """At least one node must match ``select`` (and ``require``, when given)."""

    select: NodeCondition
    require: NodeCondition | None = None

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        for node in unit.nodes:
            if self.select.test(node) and (self.require is None or self.require.test(node)):
                return []
        return [Violation(unit.span)]

    def conditions(self) -> tuple[NodeCondition, ...]:
        if self.require is None:
            return (self.select,)
        return (self.select, self.require)

    def describe(self) -> JsonValue:
        body: dict[str, JsonValue] = {"select": self.select.describe()}
        if self.require is not None:
            body["require"] = self.require.describe()
        return {"at_least_one": body}


@dataclass(frozen=True)
class Order(UnitPredicate):
    """Every node matching ``first`` must precede every node matching ``then``."""

    first: NodeCondition
    then: NodeCondition

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        leading = [node for node in unit.nodes if self.first.test(node)]
        trailing = [node for node in unit.nodes if self.then.test(node)]
        if not leading or not trailing:
            return []
        earliest_then = min(node.span.start for node in trailing)
        return [Violation(node.span, node) for node in leading if node.span.start > earliest_then]

    def conditions(self) -> tuple[NodeCondition, ...]:
        return (self.first, self.then)

    def describe(self) -> JsonValue:
        return {"order": {"first": self.first.describe(), "then": self.then.describe()}}


@dataclass(frozen=True)
class UnitAll(UnitPredicate):
    parts: tuple[UnitPredicate, ...]

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        found: list[Violation] = []
        for part in self.parts:
            found.extend(part.violations(unit))
        return _dedupe(found)

    def conditions(self) -> tuple[NodeCondition, ...]:
        return tuple(condition for part in self.parts for condition in part.conditions())

    def describe(self) -> JsonValue:
        return {"all": [part.describe() for part in self.parts]}


@dataclass(frozen=True)
class UnitAny(UnitPredicate):
    parts: tuple[UnitPredicate, ...]

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        results = [part.violations(unit) for part in self.parts]
        if any(not result for result in results):
            return []
        return _dedupe([violation for result in results for violation in result])

    def conditions(self) -> tuple[NodeCondition, ...]:
        return tuple(condition for part in self.parts for condition in part.conditions())

    def describe(self) -> JsonValue:
        return {"any": [part.describe() for part in self.parts]}


@dataclass(frozen=True)
class UnitNot(UnitPredicate):
    inner: UnitPredicate

    def violations(self, unit: StructuralUnit) -> list[Violation]:
        if self.inner.violations(unit):
            return []
        return [Violation(unit.span)]

    def conditions(self) -> tuple[NodeCondition, ...]:
        return self.inner.conditions()

    def describe(self) -> JsonValue:
        return {"not": self.inner.describe()}
