"""Capability catalog shared by language adapters and the rule registry.

A capability names a family of node kinds and attributes that an adapter
knows how to produce. Predicates that reference a catalogued kind or
attribute need the owning capability from the adapter of every language
they are evaluated for.
"""

from __future__ import annotations

ANNOTATION_PRESENCE: str = "annotation-presence"
NAMING_CONVENTION: str = "naming-convention"
IMPORT_GROUPING: str = "import-grouping"
CONSTRUCT_USAGE: str = "construct-usage"
CALL_USAGE: str = "call-usage"
EXCEPTION_HANDLING_SHAPE: str = "exception-handling-shape"
LITERAL_CONTENT: str = "literal-content"

ALL_CAPABILITIES: frozenset[str] = frozenset(
    {
        ANNOTATION_PRESENCE,
        NAMING_CONVENTION,
        IMPORT_GROUPING,
        CONSTRUCT_USAGE,
        CALL_USAGE,
        EXCEPTION_HANDLING_SHAPE,
        LITERAL_CONTENT,
    }
)

CAPABILITY_NODE_KINDS: dict[str, frozenset[str]] = {
    IMPORT_GROUPING: frozenset({"import"}),
    CONSTRUCT_USAGE: frozenset({"field", "constructor"}),
    CALL_USAGE: frozenset({"call"}),
    EXCEPTION_HANDLING_SHAPE: frozenset({"try", "catch"}),
    LITERAL_CONTENT: frozenset({"string-literal"}),
}

CAPABILITY_ATTRIBUTES: dict[str, frozenset[str]] = {
    ANNOTATION_PRESENCE: frozenset({"annotation-names"}),
    NAMING_CONVENTION: frozenset({"name"}),
    IMPORT_GROUPING: frozenset(
        {"module", "import-group", "import-order-position", "is-static", "is-wildcard"}
    ),
    CONSTRUCT_USAGE: frozenset({"injected", "injection-style", "is-final", "modifiers", "type"}),
    CALL_USAGE: frozenset({"callee", "receiver", "argument-count"}),
    EXCEPTION_HANDLING_SHAPE: frozenset(
        {"caught-types", "is-empty", "is-bare", "rethrows", "has-finally", "catch-count"}
    ),
    LITERAL_CONTENT: frozenset({"value", "length"}),
}

# Kinds every adapter may produce without declaring a capability.
BASE_NODE_KINDS: frozenset[str] = frozenset({"package", "class", "method", "function"})

KNOWN_NODE_KINDS: frozenset[str] = BASE_NODE_KINDS.union(*CAPABILITY_NODE_KINDS.values())
