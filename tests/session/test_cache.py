"""Tests for the findings cache and its on-disk persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ordinance.model import Finding, Span
from ordinance.registry import PolicyBundle
from ordinance.session import FindingCache, load_finding_cache, save_finding_cache
from ordinance.session.cache import content_key, load_cache, new_cache, rebind_findings


def _finding(file: str = "A.java", line: int = 3) -> Finding:
    return Finding(
        rule_id="DI-001",
        file=file,
        span=Span(file=file, start_line=line, start_column=5, end_line=line, end_column=20),
        severity="warning",
        message="Field 'repo' uses field injection",
    )


def _bundle(version: int = 1, fingerprint: str = "f" * 64) -> PolicyBundle:
    return PolicyBundle(policies={}, version=version, fingerprint=fingerprint)


def test_get_and_put() -> None:
    cache = FindingCache(4)
    key = ("abc", 1, "java")

    assert cache.get(key) is None
    cache.put(key, (_finding(),))

    assert cache.get(key) == (_finding(),)
    assert key in cache
    assert len(cache) == 1


def test_key_includes_version_and_language() -> None:
    cache = FindingCache(4)
    cache.put(("abc", 1, "java"), (_finding(),))

    assert cache.get(("abc", 2, "java")) is None
    assert cache.get(("abc", 1, "python")) is None


def test_evicts_least_recently_used() -> None:
    cache = FindingCache(2)
    cache.put(("a", 1, "java"), ())
    cache.put(("b", 1, "java"), ())
    cache.get(("a", 1, "java"))
    cache.put(("c", 1, "java"), ())

    assert ("a", 1, "java") in cache
    assert ("b", 1, "java") not in cache
    assert ("c", 1, "java") in cache
    assert len(cache) == 2


def test_empty_findings_are_cached() -> None:
    cache = FindingCache()
    cache.put(("clean", 1, "java"), ())

    assert cache.get(("clean", 1, "java")) == ()


def test_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        FindingCache(0)


def test_clear_and_items_for_version() -> None:
    cache = FindingCache()
    cache.put(("a", 1, "java"), ())
    cache.put(("b", 2, "java"), ())

    assert [key for key, _ in cache.items_for_version(2)] == [("b", 2, "java")]
    cache.clear()
    assert len(cache) == 0


def test_rebind_findings_moves_file_and_span() -> None:
    (rebound,) = rebind_findings((_finding("A.java"),), "copy/B.java")

    assert rebound.file == "copy/B.java"
    assert rebound.span.file == "copy/B.java"
    assert rebound.span.start_line == 3


def test_content_key_includes_path_only_when_messages_name_the_file() -> None:
    text = "class A {}\n"

    assert content_key(text, "a/A.java", path_in_messages=False) == content_key(
        text, "b/A.java", path_in_messages=False
    )
    assert content_key(text, "a/A.java", path_in_messages=True) != content_key(
        text, "b/A.java", path_in_messages=True
    )
    assert content_key(text, "a/A.java", path_in_messages=True) == content_key(
        text, "a/A.java", path_in_messages=True
    )


def test_round_trip_through_disk(tmp_path: Path) -> None:
    cache_path = tmp_path / "out" / ".ordinance-cache.json"
    cache = FindingCache()
    cache.put(("abc", 1, "java"), (_finding(),))
    cache.put(("def", 1, "python"), ())

    save_finding_cache(cache_path, cache, _bundle(version=1))
    restored = load_finding_cache(cache_path, _bundle(version=5))

    assert restored.get(("abc", 5, "java")) == (_finding(),)
    assert restored.get(("def", 5, "python")) == ()


def test_other_fingerprint_is_not_loaded(tmp_path: Path) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    cache = FindingCache()
    cache.put(("abc", 1, "java"), (_finding(),))
    save_finding_cache(cache_path, cache, _bundle(fingerprint="a" * 64))

    assert len(load_finding_cache(cache_path, _bundle(fingerprint="b" * 64))) == 0


def test_save_keeps_other_namespaces(tmp_path: Path) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    first = FindingCache()
    first.put(("abc", 1, "java"), ())
    save_finding_cache(cache_path, first, _bundle(fingerprint="a" * 64))
    second = FindingCache()
    second.put(("xyz", 1, "java"), ())
    save_finding_cache(cache_path, second, _bundle(fingerprint="b" * 64))

    payload = json.loads(cache_path.read_text(encoding="utf-8"))

    assert sorted(payload["namespaces"]) == ["a" * 64, "b" * 64]
    assert list(payload["namespaces"]["a" * 64]["entries"]) == ["java:abc"]


def test_only_current_version_entries_are_saved(tmp_path: Path) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    cache = FindingCache()
    cache.put(("old", 1, "java"), ())
    cache.put(("new", 2, "java"), ())

    save_finding_cache(cache_path, cache, _bundle(version=2))
    payload = json.loads(cache_path.read_text(encoding="utf-8"))

    assert list(payload["namespaces"]["f" * 64]["entries"]) == ["java:new"]


def test_corrupt_cache_file_is_ignored(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    cache_path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        payload = load_cache(cache_path)

    assert payload == new_cache()
    assert "Ignoring unreadable cache" in caplog.text


def test_wrong_cache_version_is_ignored(tmp_path: Path) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    cache_path.write_text(json.dumps({"version": 999, "namespaces": {}}), encoding="utf-8")

    assert load_cache(cache_path) == new_cache()


def test_malformed_entries_are_skipped(tmp_path: Path) -> None:
    cache_path = tmp_path / ".ordinance-cache.json"
    namespace = {
        "policy_fingerprint": "f" * 64,
        "entries": {
            "java:good": [_finding().to_dict()],
            "java:bad": [{"rule_id": "X"}],
            "no-separator": [],
        },
    }
    cache_path.write_text(json.dumps({"version": 1, "namespaces": {"f" * 64: namespace}}), encoding="utf-8")

    restored = load_finding_cache(cache_path, _bundle())

    assert len(restored) == 1
    assert ("good", 1, "java") in restored
