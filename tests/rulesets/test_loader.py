"""Tests for loading rule-set documents and the bundled rule sets."""

from __future__ import annotations

from pathlib import Path

import pytest

from ordinance.exceptions import RuleLoadError, RuleSetSchemaError
from ordinance.predicates import required_capabilities
from ordinance.registry import RuleRegistry
from ordinance.rulesets import (
    bundled_rule_sets,
    load_rule_set_file,
    load_rule_sets,
    load_rule_sources,
    parse_rule_set,
)

TEAM_RULES = """\
name: team
scope: java
version: 3
description: Team conventions.
rules:
  - id: TEAM-001
    severity: error
    category: injection
    rationale: Prefer constructors.
    predicate:
      every:
        select: {kind: field}
        require: {lacks: injected}
    message: "Field '{name}' is injected"
"""


def _write(directory: Path, name: str, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_rule_set_file(tmp_path: Path) -> None:
    rule_set = load_rule_set_file(_write(tmp_path, "team.yaml", TEAM_RULES))

    assert rule_set.name == "team"
    assert rule_set.scope == "java"
    assert rule_set.version == 3
    assert rule_set.description == "Team conventions."
    assert rule_set.source_path.endswith("team.yaml")
    (rule,) = rule_set.rules
    assert rule.id == "TEAM-001"
    assert rule.scope == "java"
    assert rule.severity == "error"
    assert rule.category == "injection"
    assert rule.rationale == "Prefer constructors."
    assert rule.rule_set == "team"
    assert rule.predicate is not None
    assert rule.predicate.kinds() == frozenset({"field"})


def test_defaults_for_optional_fields() -> None:
    rule_set = parse_rule_set(
        {
            "name": "minimal",
            "scope": "common",
            "rules": [
                {
                    "id": "M-1",
                    "severity": "info",
                    "predicate": {"at_least_one": {"select": {"kind": "class"}}},
                    "message": "needs a class",
                }
            ],
        },
        "minimal.yaml",
    )

    assert rule_set.version == 1
    assert rule_set.description == ""
    assert rule_set.rules[0].category == "general"
    assert rule_set.rules[0].rationale == ""


def test_invalid_document_raises_schema_error() -> None:
    with pytest.raises(RuleSetSchemaError, match=r"bad\.yaml: invalid rule set") as excinfo:
        parse_rule_set({"name": "bad", "scope": "java", "rules": [{"id": "X"}]}, "bad.yaml")

    assert excinfo.value.rule_set == "bad"
    assert "RULE006" in str(excinfo.value)


def test_invalid_yaml_raises_schema_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "broken.yaml", "name: [unclosed\n")

    with pytest.raises(RuleSetSchemaError, match="invalid YAML"):
        load_rule_set_file(path)


def test_unreadable_file_raises_schema_error(tmp_path: Path) -> None:
    with pytest.raises(RuleSetSchemaError, match="failed to read rule set"):
        load_rule_set_file(tmp_path / "missing.yaml")


def test_load_rule_sets_reads_yaml_files_sorted(tmp_path: Path) -> None:
    rules_dir = tmp_path / "rules"
    _write(rules_dir, "b.yml", TEAM_RULES.replace("name: team", "name: b-team"))
    _write(rules_dir, "a.yaml", TEAM_RULES.replace("name: team", "name: a-team"))
    _write(rules_dir, "notes.txt", "not a rule set")

    assert [rule_set.name for rule_set in load_rule_sets([rules_dir])] == ["a-team", "b-team"]


def test_missing_rules_dir_is_a_load_error(tmp_path: Path) -> None:
    with pytest.raises(RuleLoadError, match="rules directory not found"):
        load_rule_sets([tmp_path / "nope"])


def test_load_rule_sources_puts_bundled_first(tmp_path: Path) -> None:
    rules_dir = tmp_path / "rules"
    _write(rules_dir, "team.yaml", TEAM_RULES)

    names = [rule_set.name for rule_set in load_rule_sources([rules_dir])]

    assert names == ["common", "java", "python", "team"]
    assert [rule_set.name for rule_set in load_rule_sources([rules_dir], include_bundled=False)] == ["team"]


def test_bundled_rule_sets_load() -> None:
    by_name = {rule_set.name: rule_set for rule_set in bundled_rule_sets()}

    assert set(by_name) == {"common", "java", "python"}
    assert by_name["common"].scope == "common"
    assert {rule.id for rule in by_name["java"].rules} >= {"DI-001", "DI-002", "IMP-001", "IMP-002"}
    assert {rule.id for rule in by_name["common"].rules} >= {"SEC-001", "ERR-001", "NAME-001", "LOG-001"}


def test_bundled_rule_sets_build_cleanly(registry: RuleRegistry) -> None:
    bundle = registry.build(bundled_rule_sets(), ["common", "java", "python"])

    assert bundle.rejections == ()
    assert "DI-001" in bundle.policy_for("java")
    assert "DI-001" not in bundle.policy_for("python")
    assert "PY-001" in bundle.policy_for("python")
    assert "SEC-001" in bundle.policy_for("python")


def test_bundled_common_rules_avoid_construct_usage() -> None:
    (common,) = [rule_set for rule_set in bundled_rule_sets() if rule_set.name == "common"]

    for rule in common.rules:
        assert rule.predicate is not None
        assert "construct-usage" not in required_capabilities(rule.predicate), rule.id
