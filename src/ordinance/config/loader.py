"""Config loading and normalization."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import yaml

from ordinance.config.model import OrdinanceConfig
from ordinance.constants.config import ALLOWED_CONFIG_KEYS, CONFIG_FILENAME
from ordinance.constants.rules import VALID_SEVERITIES
from ordinance.exceptions import ConfigError


def load_config(root: Path, config_path: Path | None = None) -> OrdinanceConfig:
    """Load and validate engine config from ``ordinance.yaml`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return OrdinanceConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    unknown = sorted((str(key) for key in set(raw) - ALLOWED_CONFIG_KEYS))
    if unknown:
        hint = _suggest_key(unknown[0], ALLOWED_CONFIG_KEYS)
        message = f"Unknown config key `{unknown[0]}` in {path}"
        raise ConfigError(f"{message}; {hint}" if hint else message)

    defaults = OrdinanceConfig()
    rules_dirs = tuple((root / entry).resolve() for entry in _string_list(raw, "rules_dirs", default=()))
    precedence_raw = raw.get("precedence")
    precedence = _string_list(raw, "precedence", default=()) if precedence_raw is not None else None

    fail_on = raw.get("fail_on", defaults.fail_on)
    if fail_on not in VALID_SEVERITIES:
        raise ConfigError(f"fail_on must be one of {sorted(VALID_SEVERITIES)}, got {fail_on!r}")

    return OrdinanceConfig(
        rules_dirs=rules_dirs,
        precedence=precedence,
        include=_string_list(raw, "include", default=defaults.include),
        exclude=_string_list(raw, "exclude", default=defaults.exclude),
        max_file_mb=_positive_int(raw, "max_file_mb", defaults.max_file_mb),
        workers=_positive_int(raw, "workers", defaults.workers),
        cache_size=_positive_int(raw, "cache_size", defaults.cache_size),
        first_party=_string_list(raw, "first_party", default=()),
        fail_on=fail_on,
    )


def _string_list(raw: dict[str, Any], key: str, *, default: tuple[str, ...]) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise ConfigError(f"{key} must be a list of non-empty strings")
    return tuple(item.strip() for item in value)


def _positive_int(raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def _suggest_key(unknown: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean' hint for a mistyped key, or an empty string."""
    matches = difflib.get_close_matches(unknown, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
