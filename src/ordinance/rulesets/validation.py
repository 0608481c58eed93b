"""Collect-all validation for rule-set sources.

Returns a list of :class:`ValidationError` instances rather than raising,
so ``ordinance validate-rules`` can report every problem in one pass.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import yaml

from ordinance.constants.rules import RULE_SET_SUFFIXES
from ordinance.constants.validation import RULE001, RULE002, RULE003, RULE008
from ordinance.exceptions.validation import ValidationError, sort_errors

from .loader import BUNDLED_DIR
from .schema import collect_rule_set_errors


def validate_rule_sources(
    sources: Iterable[Path] = (),
    *,
    include_bundled: bool = True,
) -> list[ValidationError]:
    """Validate rule-set directories and files, returning errors in deterministic order.

    Bundled rule sets take part so that a custom set reusing a bundled
    name is reported as a duplicate.
    """
    errors: list[ValidationError] = []
    paths: list[Path] = []
    if include_bundled:
        paths.extend(_resolve_source(BUNDLED_DIR, errors))
    for source in sources:
        paths.extend(_resolve_source(source, errors))

    names: dict[str, str] = {}
    for path in paths:
        _validate_file(path, errors, names)
    return sort_errors(errors)


def _resolve_source(source: Path, errors: list[ValidationError]) -> list[Path]:
    resolved = source.resolve()
    if resolved.is_dir():
        return sorted(
            path for path in resolved.iterdir() if path.is_file() and path.suffix.lower() in RULE_SET_SUFFIXES
        )
    if not resolved.exists():
        errors.append(
            ValidationError(code=RULE001, path=str(resolved), field="", message=f"rule source not found: {resolved}")
        )
        return []
    if resolved.suffix.lower() not in RULE_SET_SUFFIXES:
        errors.append(
            ValidationError(
                code=RULE002,
                path=str(resolved),
                field="",
                message=f"rule-set file must use a .yaml or .yml extension: {resolved.name}",
                hint="rename the file",
            )
        )
        return []
    return [resolved]


def _validate_file(path: Path, errors: list[ValidationError], names: dict[str, str]) -> None:
    path_str = str(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        errors.append(
            ValidationError(code=RULE001, path=path_str, field="", message=f"failed to read rule set: {exc}")
        )
        return
    except yaml.YAMLError as exc:
        errors.append(ValidationError(code=RULE003, path=path_str, field="", message=f"invalid YAML: {exc}"))
        return

    errors.extend(collect_rule_set_errors(raw, path_str))

    name = raw.get("name") if isinstance(raw, dict) else None
    if isinstance(name, str) and name.strip():
        previous = names.get(name.strip())
        if previous is not None:
            errors.append(
                ValidationError(
                    code=RULE008,
                    path=path_str,
                    field="name",
                    message=f"duplicate rule-set name `{name.strip()}` (already defined in {previous})",
                )
            )
        else:
            names[name.strip()] = path_str
