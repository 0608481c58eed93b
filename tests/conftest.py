"""Shared pytest fixtures and builders for Ordinance tests."""

from __future__ import annotations

from typing import Any

import pytest

from ordinance.adapters import AdapterRegistry, JavaAdapter, PythonAdapter
from ordinance.model import Rule, RuleSet, Span, StructuralNode, StructuralUnit
from ordinance.predicates import compile_predicate
from ordinance.registry import RuleRegistry


def make_node(
    kind: str,
    line: int = 1,
    column: int = 1,
    file: str = "Sample.java",
    **attributes: Any,
) -> StructuralNode:
    """Build a structural node; attribute names use ``_`` for ``-``."""
    return StructuralNode(
        kind=kind,
        span=Span(file=file, start_line=line, start_column=column, end_line=line, end_column=column + 10),
        attributes={name.replace("_", "-"): value for name, value in attributes.items()},
    )


def make_unit(
    *nodes: StructuralNode,
    file: str = "Sample.java",
    language: str = "java",
    line_count: int = 20,
) -> StructuralUnit:
    return StructuralUnit(file=file, language=language, nodes=tuple(nodes), line_count=line_count)


def make_rule(
    rule_id: str,
    predicate: dict[str, Any] | None,
    *,
    scope: str = "common",
    severity: str = "warning",
    message: str = "violation of {rule_id}",
    rule_set: str = "",
) -> Rule:
    return Rule(
        id=rule_id,
        scope=scope,
        severity=severity,
        predicate=compile_predicate(predicate),
        message=message,
        rule_set=rule_set,
    )


def make_rule_set(name: str, scope: str, *rules: Rule, version: int = 1) -> RuleSet:
    return RuleSet(
        name=name,
        scope=scope,
        rules=tuple(
            Rule(
                id=rule.id,
                scope=scope,
                severity=rule.severity,
                predicate=rule.predicate,
                message=rule.message,
                category=rule.category,
                rationale=rule.rationale,
                rule_set=name,
            )
            for rule in rules
        ),
        version=version,
    )


NO_FIELD_INJECTION: dict[str, Any] = {"every": {"select": {"kind": "field"}, "require": {"lacks": "injected"}}}
NO_SECRET_LITERALS: dict[str, Any] = {
    "every": {
        "select": {"kind": "string-literal"},
        "require": {"not": {"matches": {"attr": "value", "pattern": "AKIA[0-9A-Z]{16}"}}},
    }
}
NO_EMPTY_CATCH: dict[str, Any] = {"every": {"select": {"kind": "catch"}, "require": {"lacks": "is-empty"}}}


@pytest.fixture(scope="session")
def adapters() -> AdapterRegistry:
    """Java and Python adapters; constructing grammars once per session."""
    return AdapterRegistry((JavaAdapter(), PythonAdapter(first_party=("myapp",))))


@pytest.fixture()
def registry(adapters: AdapterRegistry) -> RuleRegistry:
    return RuleRegistry(adapters)
