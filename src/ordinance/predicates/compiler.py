"""Compiler: turn a predicate expression from a rule document into a predicate tree.

Validation is fail-fast: the first problem raises ``PredicateError`` with a
dotted path to the offending part of the expression.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from ordinance.constants.capabilities import KNOWN_NODE_KINDS
from ordinance.exceptions import PredicateError
from ordinance.predicates.conditions import (
    AllOf,
    AnyOf,
    AttributeEquals,
    HasAttribute,
    KindIs,
    LacksAttribute,
    MatchesPattern,
    NodeCondition,
    NotOf,
)
from ordinance.predicates.quantifiers import (
    AtLeastOne,
    Every,
    Order,
    UnitAll,
    UnitAny,
    UnitNot,
    UnitPredicate,
)


def compile_predicate(expression: Any, *, path: str = "predicate") -> UnitPredicate | None:
    """Compile a unit predicate expression.

    Returns ``None`` for an empty expression so the registry can report the
    rule by id; any other malformed expression raises ``PredicateError``.
    """
    if expression is None or expression == {}:
        return None
    return _compile_unit(expression, path)


def compile_condition(expression: Any, *, path: str = "condition") -> NodeCondition:
    """Compile a node condition. Multiple keys in one mapping are AND-ed."""
    if not isinstance(expression, dict) or not expression:
        raise PredicateError(f"{path}: node condition must be a non-empty mapping")

    unknown = set(expression) - set(_CONDITION_OPS)
    if unknown:
        raise PredicateError(
            f"{path}: unknown condition keys {sorted(unknown)}; expected any of {sorted(_CONDITION_OPS)}"
        )

    parts = [_CONDITION_OPS[key](value, f"{path}.{key}") for key, value in expression.items()]
    if len(parts) == 1:
        return parts[0]
    return AllOf(tuple(parts))


def _compile_unit(expression: Any, path: str) -> UnitPredicate:
    if not isinstance(expression, dict) or len(expression) != 1:
        raise PredicateError(f"{path}: expected a mapping with exactly one of {sorted(_UNIT_OPS)}")

    ((op_name, argument),) = expression.items()
    builder = _UNIT_OPS.get(op_name)
    if builder is None:
        raise PredicateError(f"{path}: unknown quantifier '{op_name}'; expected one of {sorted(_UNIT_OPS)}")
    return builder(argument, f"{path}.{op_name}")


def _mapping(argument: Any, path: str, *, required: tuple[str, ...], optional: tuple[str, ...] = ()) -> dict:
    if not isinstance(argument, dict):
        raise PredicateError(f"{path}: must be a mapping")
    unknown = set(argument) - set(required) - set(optional)
    if unknown:
        raise PredicateError(f"{path}: unknown keys {sorted(unknown)}")
    for key in required:
        if key not in argument:
            raise PredicateError(f"{path}: missing required key '{key}'")
    return argument


def _names(argument: Any, path: str) -> tuple[str, ...]:
    values = [argument] if isinstance(argument, str) else argument
    if not isinstance(values, list) or not values:
        raise PredicateError(f"{path}: must be a string or a non-empty list of strings")
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise PredicateError(f"{path}: entries must be non-empty strings")
    return tuple(value.strip() for value in values)


def _attribute(argument: Any, path: str) -> str:
    if not isinstance(argument, str) or not argument.strip():
        raise PredicateError(f"{path}: must be a non-empty string")
    return argument.strip()


def _build_every(argument: Any, path: str) -> UnitPredicate:
    body = _mapping(argument, path, required=("select", "require"))
    return Every(
        select=compile_condition(body["select"], path=f"{path}.select"),
        require=compile_condition(body["require"], path=f"{path}.require"),
    )


def _build_at_least_one(argument: Any, path: str) -> UnitPredicate:
    body = _mapping(argument, path, required=("select",), optional=("require",))
    require = body.get("require")
    return AtLeastOne(
        select=compile_condition(body["select"], path=f"{path}.select"),
        require=compile_condition(require, path=f"{path}.require") if require is not None else None,
    )


def _build_order(argument: Any, path: str) -> UnitPredicate:
    body = _mapping(argument, path, required=("first", "then"))
    return Order(
        first=compile_condition(body["first"], path=f"{path}.first"),
        then=compile_condition(body["then"], path=f"{path}.then"),
    )


def _unit_list(argument: Any, path: str) -> tuple[UnitPredicate, ...]:
    if not isinstance(argument, list) or not argument:
        raise PredicateError(f"{path}: must be a non-empty list")
    return tuple(_compile_unit(item, f"{path}[{index}]") for index, item in enumerate(argument))


def _build_unit_all(argument: Any, path: str) -> UnitPredicate:
    return UnitAll(_unit_list(argument, path))


def _build_unit_any(argument: Any, path: str) -> UnitPredicate:
    return UnitAny(_unit_list(argument, path))


def _build_unit_not(argument: Any, path: str) -> UnitPredicate:
    return UnitNot(_compile_unit(argument, path))


def _build_kind(argument: Any, path: str) -> NodeCondition:
    names = _names(argument, path)
    unknown = sorted(set(names) - KNOWN_NODE_KINDS)
    if unknown:
        raise PredicateError(f"{path}: unknown node kind(s) {unknown}; expected any of {sorted(KNOWN_NODE_KINDS)}")
    return KindIs(names)


def _build_has(argument: Any, path: str) -> NodeCondition:
    return HasAttribute(_names(argument, path))


def _build_lacks(argument: Any, path: str) -> NodeCondition:
    return LacksAttribute(_names(argument, path))


def _build_matches(argument: Any, path: str) -> NodeCondition:
    body = _mapping(argument, path, required=("attr", "pattern"))
    attribute = _attribute(body["attr"], f"{path}.attr")
    pattern = body["pattern"]
    if not isinstance(pattern, str) or not pattern:
        raise PredicateError(f"{path}.pattern: must be a non-empty string")
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise PredicateError(f"{path}.pattern: invalid regular expression {pattern!r}: {exc}") from exc
    return MatchesPattern(attribute=attribute, pattern=compiled)


def _build_equals(argument: Any, path: str) -> NodeCondition:
    body = _mapping(argument, path, required=("attr", "value"))
    attribute = _attribute(body["attr"], f"{path}.attr")
    value = body["value"]
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise PredicateError(f"{path}.value: list values must contain only strings")
        return AttributeEquals(attribute=attribute, value=tuple(value))
    if value is not None and not isinstance(value, (str, int, bool)):
        raise PredicateError(f"{path}.value: must be a string, integer, boolean, null, or list of strings")
    return AttributeEquals(attribute=attribute, value=value)


def _condition_list(argument: Any, path: str) -> tuple[NodeCondition, ...]:
    if not isinstance(argument, list) or not argument:
        raise PredicateError(f"{path}: must be a non-empty list")
    return tuple(compile_condition(item, path=f"{path}[{index}]") for index, item in enumerate(argument))


def _build_all(argument: Any, path: str) -> NodeCondition:
    return AllOf(_condition_list(argument, path))


def _build_any(argument: Any, path: str) -> NodeCondition:
    return AnyOf(_condition_list(argument, path))


def _build_not(argument: Any, path: str) -> NodeCondition:
    return NotOf(compile_condition(argument, path=path))


_UNIT_OPS: dict[str, Callable[[Any, str], UnitPredicate]] = {
    "every": _build_every,
    "at_least_one": _build_at_least_one,
    "order": _build_order,
    "all": _build_unit_all,
    "any": _build_unit_any,
    "not": _build_unit_not,
}

_CONDITION_OPS: dict[str, Callable[[Any, str], NodeCondition]] = {
    "kind": _build_kind,
    "has": _build_has,
    "lacks": _build_lacks,
    "matches": _build_matches,
    "equals": _build_equals,
    "all": _build_all,
    "any": _build_any,
    "not": _build_not,
}
