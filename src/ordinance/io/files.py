"""File-level helpers for reading and hashing source text."""

from __future__ import annotations

import hashlib
from pathlib import Path


def read_source_text(path: Path) -> str:
    """Read a source file as UTF-8, dropping a leading byte-order mark."""
    return path.read_text(encoding="utf-8").lstrip("\ufeff")


def text_sha256(text: str) -> str:
    """Return SHA-256 hex digest for in-memory source text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
