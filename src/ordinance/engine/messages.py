"""Render rule message templates."""

from __future__ import annotations

import re

from ordinance.model import Span, StructuralNode
from ordinance.types import AttributeValue

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def _format_value(value: AttributeValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, tuple):
        return ", ".join(value) if value else None
    return str(value)


def render_message(
    template: str,
    *,
    rule_id: str,
    file: str,
    span: Span,
    node: StructuralNode | None = None,
) -> str:
    """Fill ``{placeholder}`` fields from the node's attributes and the finding location.

    Placeholders with no value are left as written.
    """
    values: dict[str, AttributeValue] = dict(node.attributes) if node is not None else {}
    values.update(
        {
            "rule_id": rule_id,
            "file": file,
            "line": span.start_line,
            "column": span.start_column,
            "kind": node.kind if node is not None else None,
        }
    )

    def _replace(match: re.Match[str]) -> str:
        rendered = _format_value(values.get(match.group(1)))
        return match.group(0) if rendered is None else rendered

    return _PLACEHOLDER_RE.sub(_replace, template)


def uses_placeholder(template: str, name: str) -> bool:
    """True when *template* contains the ``{name}`` placeholder."""
    return any(match.group(1) == name for match in _PLACEHOLDER_RE.finditer(template))
