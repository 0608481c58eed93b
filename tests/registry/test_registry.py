"""Tests for rule registry validation, conflict resolution, and versioning."""

from __future__ import annotations

import pytest

from ordinance.adapters import AdapterRegistry, JavaAdapter, PythonAdapter
from ordinance.exceptions import RuleLoadError
from ordinance.registry import EffectivePolicy, RuleRegistry, input_fingerprint

from ..conftest import NO_EMPTY_CATCH, NO_FIELD_INJECTION, NO_SECRET_LITERALS, make_rule, make_rule_set


def test_specific_rule_beats_universal(registry: RuleRegistry) -> None:
    common = make_rule_set("team", "common", make_rule("R1", NO_EMPTY_CATCH, severity="warning"))
    java = make_rule_set("java-team", "java", make_rule("R1", NO_EMPTY_CATCH, severity="error"))

    # The specific set wins even when it comes first in precedence.
    bundle = registry.build([common, java], ["java-team", "team"])

    java_rule = bundle.policy_for("java").rule("R1")
    python_rule = bundle.policy_for("python").rule("R1")
    assert java_rule is not None and java_rule.rule_set == "java-team"
    assert java_rule.severity == "error"
    assert python_rule is not None and python_rule.rule_set == "team"


def test_later_rule_set_wins_at_equal_specificity(registry: RuleRegistry) -> None:
    base = make_rule_set("base", "common", make_rule("R1", NO_EMPTY_CATCH, severity="info"))
    team = make_rule_set("team", "common", make_rule("R1", NO_EMPTY_CATCH, severity="error"))

    forward = registry.build([base, team], ["base", "team"])
    reverse = registry.build([base, team], ["team", "base"])

    assert forward.policy_for("java").rule("R1").rule_set == "team"
    assert reverse.policy_for("java").rule("R1").rule_set == "base"


def test_resolution_ignores_input_order(registry: RuleRegistry) -> None:
    base = make_rule_set("base", "common", make_rule("R1", NO_EMPTY_CATCH, severity="info"))
    team = make_rule_set("team", "common", make_rule("R1", NO_EMPTY_CATCH, severity="error"))

    first = registry.build([base, team], ["base", "team"])
    second = registry.build([team, base], ["base", "team"])

    assert first.policy_for("java") == second.policy_for("java")
    assert first.fingerprint == second.fingerprint


def test_policies_are_sorted_and_unique(registry: RuleRegistry) -> None:
    rule_set = make_rule_set(
        "team",
        "common",
        make_rule("Z-9", NO_EMPTY_CATCH),
        make_rule("A-1", NO_SECRET_LITERALS),
    )

    bundle = registry.build([rule_set], ["team"])

    assert bundle.languages == ("java", "python")
    assert bundle.policy_for("java").rule_ids == ("A-1", "Z-9")
    assert bundle.policy_for("ruby") is None


def test_language_scoped_rules_stay_in_their_language(registry: RuleRegistry) -> None:
    java = make_rule_set("java", "java", make_rule("DI", NO_FIELD_INJECTION))

    bundle = registry.build([java], ["java"])

    assert "DI" in bundle.policy_for("java")
    assert "DI" not in bundle.policy_for("python")


def test_universal_rule_rejected_for_language_missing_capability(
    registry: RuleRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    common = make_rule_set("team", "common", make_rule("DI", NO_FIELD_INJECTION), make_rule("SEC", NO_SECRET_LITERALS))

    with caplog.at_level("WARNING", logger="ordinance.registry.builder"):
        bundle = registry.build([common], ["team"])

    assert bundle.policy_for("java").rule_ids == ("DI", "SEC")
    assert bundle.policy_for("python").rule_ids == ("SEC",)
    assert len(bundle.rejections) == 1
    rejection = bundle.rejections[0]
    assert (rejection.rule_id, rejection.language, rejection.missing) == ("DI", "python", ("construct-usage",))
    assert "DI not evaluated for python" in caplog.text


def test_language_scoped_rule_missing_capability_fails_load(registry: RuleRegistry) -> None:
    python = make_rule_set("py", "python", make_rule("DI", NO_FIELD_INJECTION))

    with pytest.raises(RuleLoadError, match="construct-usage") as excinfo:
        registry.build([python], ["py"])

    assert excinfo.value.rule_id == "DI"
    assert excinfo.value.rule_set == "py"


@pytest.mark.parametrize(
    ("rule_sets", "precedence", "message"),
    [
        (
            [make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))] * 2,
            ["a"],
            "duplicate rule-set name 'a'",
        ),
        (
            [make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))],
            ["a", "a"],
            "more than once in precedence",
        ),
        (
            [make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))],
            ["a", "ghost"],
            "unknown rule set 'ghost'",
        ),
        (
            [
                make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH)),
                make_rule_set("b", "common", make_rule("R2", NO_EMPTY_CATCH)),
            ],
            ["a"],
            "'b' is missing from precedence",
        ),
        (
            [make_rule_set("rb", "ruby", make_rule("R1", NO_EMPTY_CATCH))],
            ["rb"],
            "language 'ruby' which has no adapter",
        ),
        (
            [make_rule_set("a", "common", make_rule("R1", None))],
            ["a"],
            "empty predicate",
        ),
        (
            [make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH, severity="fatal"))],
            ["a"],
            "invalid severity 'fatal'",
        ),
        (
            [make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH), make_rule("R1", NO_SECRET_LITERALS))],
            ["a"],
            "duplicate rule id 'R1'",
        ),
        (
            [make_rule_set("a", "common", make_rule("  ", NO_EMPTY_CATCH))],
            ["a"],
            "empty id",
        ),
    ],
)
def test_invalid_inputs_raise_rule_load_error(
    registry: RuleRegistry, rule_sets: list, precedence: list[str], message: str
) -> None:
    with pytest.raises(RuleLoadError, match=message):
        registry.build(rule_sets, precedence)


def test_failed_build_does_not_bump_version(registry: RuleRegistry) -> None:
    good = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))
    registry.build([good], ["a"])

    with pytest.raises(RuleLoadError):
        registry.build([good], ["a", "ghost"])

    assert registry.version == 1


def test_identical_rebuild_keeps_version(registry: RuleRegistry) -> None:
    rule_set = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))

    first = registry.build([rule_set], ["a"])
    second = registry.build([rule_set], ["a"])

    assert first.version == second.version == 1
    assert first.policy_for("java").version == 1


def test_changed_rules_bump_version(registry: RuleRegistry) -> None:
    before = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH, severity="info"))
    after = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH, severity="error"))

    first = registry.build([before], ["a"])
    second = registry.build([after], ["a"])

    assert second.version == first.version + 1
    assert second.policy_for("python").version == second.version
    assert first.fingerprint != second.fingerprint


def test_input_fingerprint_depends_on_precedence() -> None:
    a = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))
    b = make_rule_set("b", "common", make_rule("R2", NO_EMPTY_CATCH))

    assert input_fingerprint([a, b], ["a", "b"]) == input_fingerprint([b, a], ["a", "b"])
    assert input_fingerprint([a, b], ["a", "b"]) != input_fingerprint([a, b], ["b", "a"])


def test_fingerprint_depends_on_adapter_settings() -> None:
    rule_set = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))
    plain = AdapterRegistry((PythonAdapter(),))
    configured = AdapterRegistry((PythonAdapter(first_party=("myapp",)),))

    assert input_fingerprint([rule_set], ["a"], plain) != input_fingerprint([rule_set], ["a"], configured)
    assert input_fingerprint([rule_set], ["a"], plain) == input_fingerprint(
        [rule_set], ["a"], AdapterRegistry((PythonAdapter(),))
    )
    assert RuleRegistry(plain).build([rule_set], ["a"]).fingerprint != (
        RuleRegistry(configured).build([rule_set], ["a"]).fingerprint
    )


def test_registry_limited_to_its_adapters() -> None:
    registry = RuleRegistry(AdapterRegistry((JavaAdapter(),)))
    rule_set = make_rule_set("a", "common", make_rule("R1", NO_EMPTY_CATCH))

    bundle = registry.build([rule_set], ["a"])

    assert bundle.languages == ("java",)


def test_effective_policy_rejects_duplicate_ids() -> None:
    rule = make_rule("R1", NO_EMPTY_CATCH)

    with pytest.raises(ValueError, match="duplicate rule id"):
        EffectivePolicy(language="java", version=1, rules=(rule, rule))


def test_effective_policy_fingerprint_tracks_content() -> None:
    info = EffectivePolicy(language="java", version=1, rules=(make_rule("R1", NO_EMPTY_CATCH, severity="info"),))
    error = EffectivePolicy(language="java", version=1, rules=(make_rule("R1", NO_EMPTY_CATCH, severity="error"),))

    assert info.fingerprint != error.fingerprint
    assert info.fingerprint == EffectivePolicy(language="java", version=7, rules=info.rules).fingerprint
