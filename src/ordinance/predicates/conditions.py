"""Node conditions: boolean tests over a single structural node.

Conditions are immutable and side-effect free. The only failure mode is
a ``RuleEvaluationError`` when an attribute holds a value the test cannot
interpret, which the matcher isolates to the rule being evaluated.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ordinance.exceptions import RuleEvaluationError
from ordinance.model import StructuralNode
from ordinance.types import AttributeValue, JsonValue


def is_present(value: AttributeValue) -> bool:
    """Presence means a value that is not None, False, or an empty string/tuple."""
    if value is None or value is False:
        return False
    if isinstance(value, (str, tuple)) and not value:
        return False
    return True


class NodeCondition(ABC):
    """Boolean test applied to one node."""

    @abstractmethod
    def test(self, node: StructuralNode) -> bool:
        """Return whether *node* satisfies the condition."""

    def kinds(self) -> frozenset[str]:
        """Node kinds referenced by this condition."""
        return frozenset()

    def attributes(self) -> frozenset[str]:
        """Attribute names referenced by this condition."""
        return frozenset()

    @abstractmethod
    def describe(self) -> JsonValue:
        """Canonical, JSON-compatible form used for fingerprints."""


@dataclass(frozen=True)
class KindIs(NodeCondition):
    names: tuple[str, ...]

    def test(self, node: StructuralNode) -> bool:
        return node.kind in self.names

    def kinds(self) -> frozenset[str]:
        return frozenset(self.names)

    def describe(self) -> JsonValue:
        return {"kind": list(self.names)}


@dataclass(frozen=True)
class HasAttribute(NodeCondition):
    names: tuple[str, ...]

    def test(self, node: StructuralNode) -> bool:
        return all(is_present(node.get(name)) for name in self.names)

    def attributes(self) -> frozenset[str]:
        return frozenset(self.names)

    def describe(self) -> JsonValue:
        return {"has": list(self.names)}


@dataclass(frozen=True)
class LacksAttribute(NodeCondition):
    names: tuple[str, ...]

    def test(self, node: StructuralNode) -> bool:
        return not any(is_present(node.get(name)) for name in self.names)

    def attributes(self) -> frozenset[str]:
        return frozenset(self.names)

    def describe(self) -> JsonValue:
        return {"lacks": list(self.names)}


@dataclass(frozen=True)
class MatchesPattern(NodeCondition):
    """Regex search over a text attribute, or over any element of a tuple attribute."""

    attribute: str
    pattern: re.Pattern[str]

    def test(self, node: StructuralNode) -> bool:
        value = node.get(self.attribute)
        if value is None:
            return False
        if isinstance(value, str):
            return self.pattern.search(value) is not None
        if isinstance(value, tuple):
            return any(isinstance(item, str) and self.pattern.search(item) is not None for item in value)
        raise RuleEvaluationError(
            f"attribute '{self.attribute}' on {node.kind} node holds {type(value).__name__}; "
            "'matches' needs text"
        )

    def attributes(self) -> frozenset[str]:
        return frozenset({self.attribute})

    def describe(self) -> JsonValue:
        return {"matches": {"attr": self.attribute, "pattern": self.pattern.pattern}}


@dataclass(frozen=True)
class AttributeEquals(NodeCondition):
    attribute: str
    value: AttributeValue

    def test(self, node: StructuralNode) -> bool:
        actual = node.get(self.attribute)
        # bool is an int subclass; true must not equal 1.
        return type(actual) is type(self.value) and actual == self.value

    def attributes(self) -> frozenset[str]:
        return frozenset({self.attribute})

    def describe(self) -> JsonValue:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"equals": {"attr": self.attribute, "value": value}}


@dataclass(frozen=True)
class AllOf(NodeCondition):
    parts: tuple[NodeCondition, ...]

    def test(self, node: StructuralNode) -> bool:
        return all(part.test(node) for part in self.parts)

    def kinds(self) -> frozenset[str]:
        return frozenset().union(*(part.kinds() for part in self.parts))

    def attributes(self) -> frozenset[str]:
        return frozenset().union(*(part.attributes() for part in self.parts))

    def describe(self) -> JsonValue:
        return {"all": [part.describe() for part in self.parts]}


@dataclass(frozen=True)
class AnyOf(NodeCondition):
    parts: tuple[NodeCondition, ...]

    def test(self, node: StructuralNode) -> bool:
        return any(part.test(node) for part in self.parts)

    def kinds(self) -> frozenset[str]:
        return frozenset().union(*(part.kinds() for part in self.parts))

    def attributes(self) -> frozenset[str]:
        return frozenset().union(*(part.attributes() for part in self.parts))

    def describe(self) -> JsonValue:
        return {"any": [part.describe() for part in self.parts]}


@dataclass(frozen=True)
class NotOf(NodeCondition):
    inner: NodeCondition

    def test(self, node: StructuralNode) -> bool:
        return not self.inner.test(node)

    def kinds(self) -> frozenset[str]:
        return self.inner.kinds()

    def attributes(self) -> frozenset[str]:
        return self.inner.attributes()

    def describe(self) -> JsonValue:
        return {"not": self.inner.describe()}
