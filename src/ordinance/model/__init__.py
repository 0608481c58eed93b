"""Core data models for Ordinance."""

from .findings import ErrorRecord, EvaluationReport, FileReport, Finding
from .rules import Rule, RuleRejection, RuleSet
from .structure import SourceFile, Span, StructuralNode, StructuralUnit

__all__ = [
    "ErrorRecord",
    "EvaluationReport",
    "FileReport",
    "Finding",
    "Rule",
    "RuleRejection",
    "RuleSet",
    "SourceFile",
    "Span",
    "StructuralNode",
    "StructuralUnit",
]
