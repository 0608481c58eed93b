"""Load rule-set documents from YAML into immutable ``RuleSet`` objects."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from ordinance.constants.rules import DEFAULT_CATEGORY, DEFAULT_RULE_SET_VERSION, RULE_SET_SUFFIXES
from ordinance.exceptions import RuleLoadError, RuleSetSchemaError
from ordinance.model import Rule, RuleSet
from ordinance.predicates import compile_predicate

from .schema import validate_rule_set

logger = logging.getLogger(__name__)

BUNDLED_DIR: Path = Path(__file__).parent / "bundled"


def parse_rule_set(data: Any, source_path: str) -> RuleSet:
    """Validate and compile one parsed rule-set document."""
    validate_rule_set(data, source_path)

    name = data["name"].strip()
    scope = data["scope"].strip()
    rules = tuple(
        Rule(
            id=raw["id"].strip(),
            scope=scope,
            severity=raw["severity"],
            predicate=compile_predicate(raw["predicate"], path=f"{raw['id']}.predicate"),
            message=raw["message"],
            category=raw.get("category", DEFAULT_CATEGORY),
            rationale=raw.get("rationale", "").strip(),
            rule_set=name,
        )
        for raw in data["rules"]
    )
    return RuleSet(
        name=name,
        scope=scope,
        rules=rules,
        version=data.get("version", DEFAULT_RULE_SET_VERSION),
        description=data.get("description", "").strip(),
        source_path=source_path,
    )


def load_rule_set_file(path: Path) -> RuleSet:
    """Read and compile one YAML rule-set file."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuleSetSchemaError(f"{path}: failed to read rule set: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuleSetSchemaError(f"{path}: invalid YAML: {exc}") from exc

    rule_set = parse_rule_set(raw, str(path))
    logger.debug(
        "Loaded rule set %s (%s) with %d rules from %s",
        rule_set.name,
        rule_set.scope,
        len(rule_set.rules),
        path,
    )
    return rule_set


def rule_set_paths(directory: Path) -> list[Path]:
    """Return rule-set files in *directory*, sorted by name."""
    if not directory.is_dir():
        raise RuleLoadError(f"rules directory not found: {directory}")
    return sorted(
        path for path in directory.iterdir() if path.is_file() and path.suffix.lower() in RULE_SET_SUFFIXES
    )


def load_rule_sets(directories: Iterable[Path]) -> tuple[RuleSet, ...]:
    """Load every rule set under *directories*.

    The returned order is the order files were read; it never decides
    conflicts, which the registry resolves through explicit precedence.
    """
    rule_sets: list[RuleSet] = []
    for directory in directories:
        for path in rule_set_paths(directory):
            rule_sets.append(load_rule_set_file(path))
    return tuple(rule_sets)


def bundled_rule_sets() -> tuple[RuleSet, ...]:
    """Load the rule sets shipped with the package."""
    return load_rule_sets((BUNDLED_DIR,))


def load_rule_sources(
    rules_dirs: Iterable[Path] = (),
    *,
    include_bundled: bool = True,
) -> tuple[RuleSet, ...]:
    """Bundled rule sets followed by the rule sets found in *rules_dirs*."""
    bundled = bundled_rule_sets() if include_bundled else ()
    return bundled + load_rule_sets(rules_dirs)
