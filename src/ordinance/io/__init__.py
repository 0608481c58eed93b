"""Shared file I/O helpers."""

from .files import read_source_text, text_sha256
from .json_io import load_json_object, write_json_atomic

__all__ = ["load_json_object", "read_source_text", "text_sha256", "write_json_atomic"]
