"""Structural representation of parsed source files."""

from __future__ import annotations

from dataclasses import dataclass, field

from ordinance.types import AttributeValue, JsonObject


@dataclass(frozen=True, order=True)
class Span:
    """A 1-based line/column range inside one file."""

    file: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_column)

    def to_dict(self) -> JsonObject:
        return {
            "file": self.file,
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }

    @classmethod
    def from_dict(cls, payload: JsonObject) -> Span:
        def _int(key: str) -> int:
            value = payload.get(key)
            return value if isinstance(value, int) else 1

        raw_file = payload.get("file")
        return cls(
            file=raw_file if isinstance(raw_file, str) else "",
            start_line=_int("start_line"),
            start_column=_int("start_column"),
            end_line=_int("end_line"),
            end_column=_int("end_column"),
        )


@dataclass(frozen=True)
class StructuralNode:
    """One matchable construct: a declaration, import, call, literal, ..."""

    kind: str
    span: Span
    attributes: dict[str, AttributeValue] = field(default_factory=dict, hash=False, compare=True)

    def get(self, name: str) -> AttributeValue:
        return self.attributes.get(name)


@dataclass(frozen=True)
class StructuralUnit:
    """Adapter output for one source file: nodes in source order."""

    file: str
    language: str
    nodes: tuple[StructuralNode, ...]
    line_count: int

    @property
    def span(self) -> Span:
        """Span covering the whole file, used for file-level violations."""
        return Span(
            file=self.file,
            start_line=1,
            start_column=1,
            end_line=max(1, self.line_count),
            end_column=1,
        )

    def nodes_of_kind(self, kind: str) -> tuple[StructuralNode, ...]:
        return tuple(node for node in self.nodes if node.kind == kind)


@dataclass(frozen=True)
class SourceFile:
    """Evaluation target: a path, an optional language tag, and raw text."""

    path: str
    text: str
    language: str | None = None
