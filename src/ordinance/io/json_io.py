"""JSON documents for the findings cache and the evaluation report."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ordinance.types import JsonObject


def load_json_object(path: Path) -> JsonObject:
    """Read *path* as a JSON object.

    Raises ``ValueError`` when the text is not JSON or the top level is not an object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object at the top level, got {type(data).__name__}")
    return data


def write_json_atomic(
    path: Path,
    payload: object,
    *,
    temp_prefix: str,
    temp_suffix: str,
    compact: bool = False,
) -> None:
    """Write *payload* next to *path* and rename it into place.

    Readers never observe a partially written document. ``compact`` drops
    indentation for machine-only files such as the cache.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if compact:
        text = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    else:
        text = json.dumps(payload, sort_keys=True, indent=2)

    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=temp_prefix, suffix=temp_suffix)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.write("\n")
        os.replace(temp_path, path)
    finally:
        temp_path.unlink(missing_ok=True)
