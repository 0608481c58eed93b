"""Shared tree-sitter helpers for language adapters."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ordinance.model import Span

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode


def node_text(node: TSNode | None, source: bytes) -> str:
    """Return the source text covered by *node*."""
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def node_span(node: TSNode, file: str) -> Span:
    # tree-sitter uses 0-based rows and columns; spans are 1-based.
    return Span(
        file=file,
        start_line=node.start_point[0] + 1,
        start_column=node.start_point[1] + 1,
        end_line=node.end_point[0] + 1,
        end_column=node.end_point[1] + 1,
    )


def walk(root: TSNode) -> Iterator[TSNode]:
    """Yield nodes in pre-order, which is source order for a syntax tree."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def has_descendant(node: TSNode, node_type: str) -> bool:
    return any(child.type == node_type for child in walk(node) if child != node)


def first_child_of_type(node: TSNode, *node_types: str) -> TSNode | None:
    for child in node.children:
        if child.type in node_types:
            return child
    return None


def describe_syntax_error(root: TSNode) -> str:
    """Describe the first ERROR or MISSING node in a tree."""
    for node in walk(root):
        if node.type == "ERROR":
            return f"syntax error at line {node.start_point[0] + 1}, column {node.start_point[1] + 1}"
        if node.is_missing:
            return (
                f"missing '{node.type}' at line {node.start_point[0] + 1}, "
                f"column {node.start_point[1] + 1}"
            )
    return "syntax error"


def line_count(text: str) -> int:
    return max(1, len(text.splitlines()))
