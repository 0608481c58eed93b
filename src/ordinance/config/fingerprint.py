"""Config fingerprinting."""

from __future__ import annotations

import hashlib
import json

from ordinance.config.model import OrdinanceConfig


def config_fingerprint(config: OrdinanceConfig) -> str:
    """Return a stable hash of the effective config values."""
    payload = {
        "rules_dirs": [path.as_posix() for path in config.rules_dirs],
        "precedence": list(config.precedence) if config.precedence is not None else None,
        "include": list(config.include),
        "exclude": list(config.exclude),
        "max_file_mb": config.max_file_mb,
        "workers": config.workers,
        "cache_size": config.cache_size,
        "first_party": sorted(config.first_party),
        "fail_on": config.fail_on,
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()
