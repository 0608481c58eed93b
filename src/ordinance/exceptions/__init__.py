"""Shared exception hierarchy for Ordinance."""

from __future__ import annotations

from .base import OrdinanceError
from .config import ConfigError
from .evaluation import RuleEvaluationError
from .parsing import ParseError
from .rules import PredicateError, RuleLoadError, RuleSetSchemaError
from .session import StateTransitionError

__all__ = [
    "ConfigError",
    "OrdinanceError",
    "ParseError",
    "PredicateError",
    "RuleEvaluationError",
    "RuleLoadError",
    "RuleSetSchemaError",
    "StateTransitionError",
]
