"""Lookup of language adapters by language tag or file extension."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

from ordinance.model import SourceFile

from .base import LanguageAdapter
from .java import JavaAdapter
from .python import PythonAdapter


class AdapterRegistry:
    """Immutable set of adapters, at most one per language."""

    def __init__(self, adapters: Iterable[LanguageAdapter]) -> None:
        self._by_language: dict[str, LanguageAdapter] = {}
        self._by_extension: dict[str, LanguageAdapter] = {}
        for adapter in adapters:
            if adapter.language in self._by_language:
                raise ValueError(f"Duplicate adapter for language '{adapter.language}'")
            self._by_language[adapter.language] = adapter
            for extension in adapter.extensions:
                self._by_extension[extension.lower()] = adapter

    def get_adapter(self, language: str) -> LanguageAdapter | None:
        return self._by_language.get(language)

    def adapter_for_path(self, path: str) -> LanguageAdapter | None:
        return self._by_extension.get(PurePath(path).suffix.lower())

    def resolve(self, source: SourceFile) -> LanguageAdapter | None:
        """Pick the adapter for *source*: declared language first, extension otherwise."""
        if source.language is not None:
            return self.get_adapter(source.language)
        return self.adapter_for_path(source.path)

    def registered_languages(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_language))

    def signature(self) -> dict[str, dict[str, object]]:
        """Per-language adapter settings, for fingerprints of anything derived from parsing."""
        return {language: self._by_language[language].settings() for language in sorted(self._by_language)}


_DEFAULT: AdapterRegistry | None = None


def default_adapters(*, first_party: Iterable[str] = ()) -> AdapterRegistry:
    """Return the Java and Python adapters.

    Without *first_party* the shared module-level registry is reused.
    """
    global _DEFAULT
    first_party = tuple(first_party)
    if first_party:
        return AdapterRegistry((JavaAdapter(), PythonAdapter(first_party=first_party)))
    if _DEFAULT is None:
        _DEFAULT = AdapterRegistry((JavaAdapter(), PythonAdapter()))
    return _DEFAULT


def get_adapter(language: str) -> LanguageAdapter | None:
    return default_adapters().get_adapter(language)


def adapter_for_path(path: str) -> LanguageAdapter | None:
    return default_adapters().adapter_for_path(path)


def registered_languages() -> tuple[str, ...]:
    return default_adapters().registered_languages()
