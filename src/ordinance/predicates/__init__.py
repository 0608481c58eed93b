"""Declarative predicate language for rules.

Predicates are built only from node-kind tests, attribute presence and
value tests, ordering relations, and the ``every`` / ``at_least_one``
quantifiers, composed with all/any/not. There is no other control flow.
"""

from __future__ import annotations

from .capabilities import required_capabilities
from .compiler import compile_condition, compile_predicate
from .conditions import NodeCondition, is_present
from .quantifiers import UnitPredicate, Violation

__all__ = [
    "NodeCondition",
    "UnitPredicate",
    "Violation",
    "compile_condition",
    "compile_predicate",
    "is_present",
    "required_capabilities",
]
