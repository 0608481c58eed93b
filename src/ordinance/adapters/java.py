"""Java language adapter backed by the tree-sitter Java grammar."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

from ordinance.constants.capabilities import ALL_CAPABILITIES
from ordinance.constants.languages import (
    JAVA_EXTENSIONS,
    JAVA_IMPORT_GROUP_PROJECT,
    JAVA_IMPORT_GROUP_STATIC,
    JAVA_IMPORT_GROUP_STDLIB,
    JAVA_IMPORT_GROUP_THIRD_PARTY,
    JAVA_INJECTION_ANNOTATIONS,
    JAVA_PROJECT_PACKAGE_DEPTH,
    JAVA_STDLIB_PREFIXES,
    LANGUAGE_JAVA,
)
from ordinance.exceptions import ParseError
from ordinance.model import StructuralNode, StructuralUnit
from ordinance.types import AttributeValue

from .base import LanguageAdapter
from .treesitter import (
    describe_syntax_error,
    first_child_of_type,
    has_descendant,
    line_count,
    node_span,
    node_text,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)

_TYPE_DECLARATIONS: dict[str, str] = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}
_ANNOTATION_TYPES: frozenset[str] = frozenset({"marker_annotation", "annotation"})
_COMMENT_TYPES: frozenset[str] = frozenset({"line_comment", "block_comment"})
_PARAMETER_TYPES: frozenset[str] = frozenset({"formal_parameter", "spread_parameter"})


def _load_java() -> Language:
    import tree_sitter_java as tsjava

    return Language(tsjava.language())


def _modifiers(node: TSNode, source: bytes) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return ``(keywords, annotation simple names)`` from a declaration's modifiers."""
    modifiers = first_child_of_type(node, "modifiers")
    if modifiers is None:
        return (), ()
    keywords: list[str] = []
    annotations: list[str] = []
    for child in modifiers.children:
        if child.type in _ANNOTATION_TYPES:
            name = node_text(child.child_by_field_name("name"), source)
            annotations.append(name.rsplit(".", 1)[-1])
        elif not child.is_named:
            keywords.append(child.type)
    return tuple(keywords), tuple(annotations)


def _is_injected(annotations: tuple[str, ...]) -> bool:
    return any(name in JAVA_INJECTION_ANNOTATIONS for name in annotations)


def _parameter_count(node: TSNode) -> int:
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return 0
    return sum(1 for child in parameters.named_children if child.type in _PARAMETER_TYPES)


def _is_empty_block(block: TSNode | None) -> bool:
    if block is None:
        return True
    return all(child.type in _COMMENT_TYPES for child in block.named_children)


def _string_value(raw: str) -> str:
    if raw.startswith('"""') and raw.endswith('"""') and len(raw) >= 6:
        return raw[3:-3]
    if raw.startswith('"') and raw.endswith('"') and len(raw) >= 2:
        return raw[1:-1]
    return raw


class JavaAdapter(LanguageAdapter):
    """Structural view of Java compilation units."""

    language = LANGUAGE_JAVA
    extensions = JAVA_EXTENSIONS
    capabilities = ALL_CAPABILITIES
    node_kinds = frozenset(
        {
            "package",
            "import",
            "class",
            "field",
            "constructor",
            "method",
            "call",
            "try",
            "catch",
            "string-literal",
        }
    )

    def __init__(self) -> None:
        self._language = _load_java()

    def parse(self, path: str, text: str) -> StructuralUnit:
        source = text.encode("utf-8")
        # Parsers are cheap and not thread-safe, so each parse gets its own.
        tree = Parser(self._language).parse(source)
        root = tree.root_node
        if root.has_error:
            raise ParseError(path, describe_syntax_error(root))

        builder = _UnitBuilder(path, source)
        for node in walk(root):
            builder.visit(node)
        logger.debug("Parsed %s: %d structural nodes", path, len(builder.nodes))
        return StructuralUnit(
            file=path,
            language=self.language,
            nodes=tuple(builder.nodes),
            line_count=line_count(text),
        )


class _UnitBuilder:
    """Collects structural nodes for one file; never shared between threads."""

    def __init__(self, path: str, source: bytes) -> None:
        self.path = path
        self.source = source
        self.nodes: list[StructuralNode] = []
        self.package = ""
        self.import_position = 0

    def emit(self, kind: str, node: TSNode, attributes: dict[str, AttributeValue]) -> None:
        self.nodes.append(StructuralNode(kind=kind, span=node_span(node, self.path), attributes=attributes))

    def text(self, node: TSNode | None) -> str:
        return node_text(node, self.source)

    def visit(self, node: TSNode) -> None:
        node_type = node.type
        if node_type == "package_declaration":
            self._package(node)
        elif node_type == "import_declaration":
            self._import(node)
        elif node_type in _TYPE_DECLARATIONS:
            self._type_declaration(node)
        elif node_type == "field_declaration":
            self._field(node)
        elif node_type == "constructor_declaration":
            self._constructor(node)
        elif node_type == "method_declaration":
            self._method(node)
        elif node_type == "method_invocation":
            self._call(node)
        elif node_type in ("try_statement", "try_with_resources_statement"):
            self._try(node)
        elif node_type == "catch_clause":
            self._catch(node)
        elif node_type == "string_literal":
            self._string(node)

    def _enclosing_class(self, node: TSNode) -> str | None:
        parent = node.parent
        while parent is not None:
            if parent.type in _TYPE_DECLARATIONS:
                return self.text(parent.child_by_field_name("name")) or None
            parent = parent.parent
        return None

    def _package(self, node: TSNode) -> None:
        name_node = first_child_of_type(node, "scoped_identifier", "identifier")
        self.package = self.text(name_node)
        self.emit("package", node, {"name": self.package})

    def _import_group(self, module: str, is_static: bool) -> str:
        if is_static:
            return JAVA_IMPORT_GROUP_STATIC
        if module.startswith(JAVA_STDLIB_PREFIXES):
            return JAVA_IMPORT_GROUP_STDLIB
        if self.package:
            prefix = ".".join(self.package.split(".")[:JAVA_PROJECT_PACKAGE_DEPTH])
            if module == prefix or module.startswith(prefix + "."):
                return JAVA_IMPORT_GROUP_PROJECT
        return JAVA_IMPORT_GROUP_THIRD_PARTY

    def _import(self, node: TSNode) -> None:
        name_node = first_child_of_type(node, "scoped_identifier", "identifier")
        module = self.text(name_node)
        is_static = any(child.type == "static" for child in node.children)
        is_wildcard = any(child.type == "asterisk" for child in node.children)
        self.import_position += 1
        self.emit(
            "import",
            node,
            {
                "module": module,
                "is-static": is_static,
                "is-wildcard": is_wildcard,
                "import-group": self._import_group(module, is_static),
                "import-order-position": self.import_position,
            },
        )

    def _injection_style(self, body: TSNode | None) -> str:
        if body is None:
            return "none"
        constructor_injection = False
        for member in body.named_children:
            if member.type == "field_declaration":
                _, annotations = _modifiers(member, self.source)
                if _is_injected(annotations):
                    return "field"
            elif member.type == "constructor_declaration":
                _, annotations = _modifiers(member, self.source)
                if _is_injected(annotations) or _parameter_count(member) > 0:
                    constructor_injection = True
        return "constructor" if constructor_injection else "none"

    def _type_declaration(self, node: TSNode) -> None:
        keywords, annotations = _modifiers(node, self.source)
        self.emit(
            "class",
            node,
            {
                "name": self.text(node.child_by_field_name("name")),
                "declaration-type": _TYPE_DECLARATIONS[node.type],
                "annotation-names": annotations,
                "modifiers": keywords,
                "is-final": "final" in keywords,
                "injection-style": self._injection_style(node.child_by_field_name("body")),
                "enclosing-class": self._enclosing_class(node),
            },
        )

    def _field(self, node: TSNode) -> None:
        keywords, annotations = _modifiers(node, self.source)
        names = tuple(
            self.text(child.child_by_field_name("name"))
            for child in node.named_children
            if child.type == "variable_declarator"
        )
        self.emit(
            "field",
            node,
            {
                "name": names[0] if names else None,
                "names": names,
                "type": self.text(node.child_by_field_name("type")),
                "annotation-names": annotations,
                "modifiers": keywords,
                "is-final": "final" in keywords,
                "is-static": "static" in keywords,
                "injected": _is_injected(annotations),
                "enclosing-class": self._enclosing_class(node),
            },
        )

    def _constructor(self, node: TSNode) -> None:
        keywords, annotations = _modifiers(node, self.source)
        self.emit(
            "constructor",
            node,
            {
                "name": self.text(node.child_by_field_name("name")),
                "annotation-names": annotations,
                "modifiers": keywords,
                "parameter-count": _parameter_count(node),
                "injected": _is_injected(annotations),
                "enclosing-class": self._enclosing_class(node),
            },
        )

    def _method(self, node: TSNode) -> None:
        keywords, annotations = _modifiers(node, self.source)
        self.emit(
            "method",
            node,
            {
                "name": self.text(node.child_by_field_name("name")),
                "annotation-names": annotations,
                "modifiers": keywords,
                "is-final": "final" in keywords,
                "is-static": "static" in keywords,
                "parameter-count": _parameter_count(node),
                "return-type": self.text(node.child_by_field_name("type")),
                "enclosing-class": self._enclosing_class(node),
            },
        )

    def _call(self, node: TSNode) -> None:
        arguments = node.child_by_field_name("arguments")
        argument_count = 0
        if arguments is not None:
            argument_count = sum(1 for child in arguments.named_children if child.type not in _COMMENT_TYPES)
        receiver = node.child_by_field_name("object")
        self.emit(
            "call",
            node,
            {
                "callee": self.text(node.child_by_field_name("name")),
                "receiver": self.text(receiver) if receiver is not None else None,
                "argument-count": argument_count,
            },
        )

    def _try(self, node: TSNode) -> None:
        self.emit(
            "try",
            node,
            {
                "has-finally": first_child_of_type(node, "finally_clause") is not None,
                "catch-count": sum(1 for child in node.children if child.type == "catch_clause"),
                "is-empty": _is_empty_block(node.child_by_field_name("body")),
                "has-resources": node.type == "try_with_resources_statement",
            },
        )

    def _catch(self, node: TSNode) -> None:
        caught: list[str] = []
        parameter = first_child_of_type(node, "catch_formal_parameter")
        if parameter is not None:
            catch_type = first_child_of_type(parameter, "catch_type")
            if catch_type is not None:
                caught.extend(self.text(child) for child in catch_type.named_children)
        body = node.child_by_field_name("body")
        self.emit(
            "catch",
            node,
            {
                "caught-types": tuple(caught),
                "is-empty": _is_empty_block(body),
                "is-bare": False,
                "rethrows": body is not None and has_descendant(body, "throw_statement"),
            },
        )

    def _string(self, node: TSNode) -> None:
        value = _string_value(self.text(node))
        self.emit("string-literal", node, {"value": value, "length": len(value)})
