"""Tests for source reading and JSON persistence helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from ordinance.io import load_json_object, read_source_text, text_sha256, write_json_atomic


def test_read_source_text_drops_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "A.java"
    path.write_text("\ufeffclass A {}\n", encoding="utf-8")

    assert read_source_text(path) == "class A {}\n"


def test_text_sha256_is_stable() -> None:
    assert text_sha256("x = 1\n") == text_sha256("x = 1\n")
    assert text_sha256("x = 1\n") != text_sha256("x = 2\n")


def test_write_json_atomic_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "out" / "report.json"

    write_json_atomic(target, {"b": 1, "a": [1, 2]}, temp_prefix=".tmp-", temp_suffix=".json")

    assert load_json_object(target) == {"a": [1, 2], "b": 1}
    assert sorted(path.name for path in target.parent.iterdir()) == ["report.json"]


def test_compact_output_has_no_indentation(tmp_path: Path) -> None:
    target = tmp_path / "cache.json"

    write_json_atomic(target, {"k": {"v": 1}}, temp_prefix=".c-", temp_suffix=".tmp", compact=True)

    assert target.read_text(encoding="utf-8") == '{"k":{"v":1}}\n'


def test_load_json_object_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="expected a JSON object"):
        load_json_object(path)
