"""Language adapter interface.

An adapter turns raw source text into a ``StructuralUnit`` and declares
which predicate capabilities and node kinds it can produce.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import ClassVar

from ordinance.constants.capabilities import ALL_CAPABILITIES
from ordinance.model import StructuralUnit


class LanguageAdapter(ABC):
    """Abstract base class for per-language parsers."""

    language: ClassVar[str]
    extensions: ClassVar[tuple[str, ...]]
    capabilities: ClassVar[frozenset[str]]
    node_kinds: ClassVar[frozenset[str]]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Validate adapter subclasses declare a language and known capabilities."""
        super().__init_subclass__(**kwargs)
        if inspect.isabstract(cls):
            return

        language = getattr(cls, "language", None)
        if not isinstance(language, str) or not language.strip():
            raise TypeError(f"{cls.__name__} must define a non-empty class attribute `language`")
        if not getattr(cls, "extensions", ()):
            raise TypeError(f"{cls.__name__} must define at least one file extension")
        unknown = set(getattr(cls, "capabilities", frozenset())) - ALL_CAPABILITIES
        if unknown:
            raise TypeError(f"{cls.__name__} declares unknown capabilities: {sorted(unknown)}")

    @abstractmethod
    def parse(self, path: str, text: str) -> StructuralUnit:
        """Parse *text* into a structural unit; raise ``ParseError`` on malformed input."""

    def missing_capabilities(self, required: Iterable[str]) -> tuple[str, ...]:
        """Return the required capabilities this adapter does not provide, sorted."""
        return tuple(sorted(set(required) - self.capabilities))

    def settings(self) -> dict[str, object]:
        """Configuration that changes what ``parse`` produces, as JSON-compatible values."""
        return {}
