"""Tests for config loading, validation, and fingerprinting."""

from __future__ import annotations

from pathlib import Path

import pytest

from ordinance.config import OrdinanceConfig, config_fingerprint, load_config
from ordinance.constants.config import DEFAULT_EXCLUDE_GLOBS, DEFAULT_INCLUDE_GLOBS
from ordinance.exceptions import ConfigError


def _write_config(root: Path, text: str, name: str = "ordinance.yaml") -> Path:
    path = root / name
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_default_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == OrdinanceConfig()
    assert config.include == DEFAULT_INCLUDE_GLOBS
    assert config.exclude == DEFAULT_EXCLUDE_GLOBS
    assert config.workers == 1
    assert config.fail_on == "error"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    assert load_config(tmp_path) == OrdinanceConfig()


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path, tmp_path / "custom.yaml")


def test_full_config(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "rules_dirs: [team-rules]\n"
        "precedence: [common, java, python, team]\n"
        "include: ['src/**/*.java']\n"
        "exclude: generated/**\n"
        "max_file_mb: 4\n"
        "workers: 8\n"
        "cache_size: 100\n"
        "first_party: [myapp]\n"
        "fail_on: warning\n",
    )

    config = load_config(tmp_path)

    assert config.rules_dirs == ((tmp_path / "team-rules").resolve(),)
    assert config.precedence == ("common", "java", "python", "team")
    assert config.include == ("src/**/*.java",)
    assert config.exclude == ("generated/**",)
    assert config.max_file_mb == 4
    assert config.workers == 8
    assert config.cache_size == 100
    assert config.first_party == ("myapp",)
    assert config.fail_on == "warning"


def test_explicit_config_path(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "workers: 3\n", name="ci.yaml")

    assert load_config(tmp_path, path).workers == 3


def test_unknown_key_suggests_close_match(tmp_path: Path) -> None:
    _write_config(tmp_path, "worker: 2\n")

    with pytest.raises(ConfigError, match="Unknown config key `worker`.*did you mean `workers`"):
        load_config(tmp_path)


def test_unknown_key_without_suggestion(tmp_path: Path) -> None:
    _write_config(tmp_path, "zzz: 1\n")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert "did you mean" not in str(excinfo.value)


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("workers: 0\n", "workers must be a positive integer"),
        ("max_file_mb: true\n", "max_file_mb must be a positive integer"),
        ("cache_size: lots\n", "cache_size must be a positive integer"),
        ("fail_on: fatal\n", "fail_on must be one of"),
        ("include: [1, 2]\n", "include must be a list of non-empty strings"),
        ("precedence: ['']\n", "precedence must be a list of non-empty strings"),
        ("- just\n- a list\n", "must be a YAML mapping"),
        ("workers: [unclosed\n", "Invalid YAML config file"),
    ],
)
def test_invalid_values(tmp_path: Path, text: str, message: str) -> None:
    _write_config(tmp_path, text)

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_effective_precedence_defaults() -> None:
    config = OrdinanceConfig()

    assert config.effective_precedence(["zeta", "python", "common", "alpha", "java"]) == (
        "common",
        "java",
        "python",
        "alpha",
        "zeta",
    )


def test_effective_precedence_explicit() -> None:
    config = OrdinanceConfig(precedence=("team", "common"))

    assert config.effective_precedence(["common", "team", "java"]) == ("team", "common")


def test_config_fingerprint_is_stable_and_sensitive() -> None:
    base = OrdinanceConfig()

    assert config_fingerprint(base) == config_fingerprint(OrdinanceConfig())
    assert config_fingerprint(base) != config_fingerprint(OrdinanceConfig(workers=2))
    assert config_fingerprint(OrdinanceConfig(first_party=("a", "b"))) == config_fingerprint(
        OrdinanceConfig(first_party=("b", "a"))
    )
