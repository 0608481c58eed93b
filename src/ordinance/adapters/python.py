"""Python language adapter backed by the tree-sitter Python grammar."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

from ordinance.constants.capabilities import ALL_CAPABILITIES, CONSTRUCT_USAGE
from ordinance.constants.languages import (
    LANGUAGE_PYTHON,
    PYTHON_EXTENSIONS,
    PYTHON_IMPORT_GROUP_FIRST_PARTY,
    PYTHON_IMPORT_GROUP_FUTURE,
    PYTHON_IMPORT_GROUP_LOCAL,
    PYTHON_IMPORT_GROUP_STDLIB,
    PYTHON_IMPORT_GROUP_THIRD_PARTY,
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

_STRING_RE = re.compile(r"^[rRbBuUfFtT]*('''|\"\"\"|'|\")(?P<body>.*)\1$", re.DOTALL)
_EXCEPT_TYPES: frozenset[str] = frozenset({"except_clause", "except_group_clause"})
_NON_PARAMETERS: frozenset[str] = frozenset({"comment", "keyword_separator", "positional_separator"})


def _load_python() -> Language:
    import tree_sitter_python as tspython

    return Language(tspython.language())


def _is_trivial_statement(node: TSNode) -> bool:
    """``pass``, ``...`` or a comment: statements that do no work."""
    if node.type in ("pass_statement", "comment"):
        return True
    if node.type == "expression_statement" and node.named_child_count == 1:
        return node.named_children[0].type == "ellipsis"
    return False


class PythonAdapter(LanguageAdapter):
    """Structural view of Python modules.

    Python has no field or constructor injection, so construct-usage is the
    one capability this adapter does not provide.
    """

    language = LANGUAGE_PYTHON
    extensions = PYTHON_EXTENSIONS
    capabilities = ALL_CAPABILITIES - {CONSTRUCT_USAGE}
    node_kinds = frozenset({"import", "class", "function", "call", "try", "catch", "string-literal"})

    def __init__(self, *, first_party: Iterable[str] = ()) -> None:
        self._language = _load_python()
        self.first_party: frozenset[str] = frozenset(first_party)

    def parse(self, path: str, text: str) -> StructuralUnit:
        source = text.encode("utf-8")
        tree = Parser(self._language).parse(source)
        root = tree.root_node
        if root.has_error:
            raise ParseError(path, describe_syntax_error(root))

        builder = _UnitBuilder(path, source, self.import_group)
        for node in walk(root):
            builder.visit(node)
        logger.debug("Parsed %s: %d structural nodes", path, len(builder.nodes))
        return StructuralUnit(
            file=path,
            language=self.language,
            nodes=tuple(builder.nodes),
            line_count=line_count(text),
        )

    def settings(self) -> dict[str, object]:
        return {"first_party": sorted(self.first_party)}

    def import_group(self, module: str) -> str:
        """Classify a module path the way isort sections imports."""
        if module == "__future__":
            return PYTHON_IMPORT_GROUP_FUTURE
        if module.startswith("."):
            return PYTHON_IMPORT_GROUP_LOCAL
        top = module.split(".", 1)[0]
        if top in self.first_party:
            return PYTHON_IMPORT_GROUP_FIRST_PARTY
        if top in sys.stdlib_module_names:
            return PYTHON_IMPORT_GROUP_STDLIB
        return PYTHON_IMPORT_GROUP_THIRD_PARTY


class _UnitBuilder:
    def __init__(self, path: str, source: bytes, import_group: Callable[[str], str]) -> None:
        self.path = path
        self.source = source
        self.import_group = import_group
        self.nodes: list[StructuralNode] = []
        self.import_position = 0

    def emit(self, kind: str, node: TSNode, attributes: dict[str, AttributeValue]) -> None:
        self.nodes.append(StructuralNode(kind=kind, span=node_span(node, self.path), attributes=attributes))

    def text(self, node: TSNode | None) -> str:
        return node_text(node, self.source)

    def visit(self, node: TSNode) -> None:
        node_type = node.type
        if node_type == "import_statement":
            for child in node.children_by_field_name("name"):
                self._import(node, self._imported_module(child))
        elif node_type == "import_from_statement":
            self._import(node, self.text(node.child_by_field_name("module_name")))
        elif node_type == "future_import_statement":
            self._import(node, "__future__")
        elif node_type == "class_definition":
            self._class(node)
        elif node_type == "function_definition":
            self._function(node)
        elif node_type == "call":
            self._call(node)
        elif node_type == "try_statement":
            self._try(node)
        elif node_type in _EXCEPT_TYPES:
            self._except(node)
        elif node_type == "string":
            self._string(node)

    def _imported_module(self, node: TSNode) -> str:
        if node.type == "aliased_import":
            return self.text(node.child_by_field_name("name"))
        return self.text(node)

    def _import(self, node: TSNode, module: str) -> None:
        self.import_position += 1
        self.emit(
            "import",
            node,
            {
                "module": module,
                "is-static": False,
                "is-wildcard": first_child_of_type(node, "wildcard_import") is not None,
                "import-group": self.import_group(module),
                "import-order-position": self.import_position,
            },
        )

    def _decorators(self, node: TSNode) -> tuple[str, ...]:
        parent = node.parent
        if parent is None or parent.type != "decorated_definition":
            return ()
        names: list[str] = []
        for child in parent.children:
            if child.type != "decorator":
                continue
            expression = child.named_children[0] if child.named_child_count else None
            if expression is not None and expression.type == "call":
                expression = expression.child_by_field_name("function")
            names.append(self.text(expression).rsplit(".", 1)[-1])
        return tuple(names)

    def _enclosing_class(self, node: TSNode) -> str | None:
        parent = node.parent
        while parent is not None:
            if parent.type == "class_definition":
                return self.text(parent.child_by_field_name("name")) or None
            if parent.type == "function_definition":
                return None
            parent = parent.parent
        return None

    def _class(self, node: TSNode) -> None:
        superclasses = node.child_by_field_name("superclasses")
        bases: tuple[str, ...] = ()
        if superclasses is not None:
            bases = tuple(
                self.text(child)
                for child in superclasses.named_children
                if child.type not in ("keyword_argument", "comment")
            )
        self.emit(
            "class",
            node,
            {
                "name": self.text(node.child_by_field_name("name")),
                "annotation-names": self._decorators(node),
                "bases": bases,
                "enclosing-class": self._enclosing_class(node),
            },
        )

    def _function(self, node: TSNode) -> None:
        parameters = node.child_by_field_name("parameters")
        parameter_count = 0
        if parameters is not None:
            parameter_count = sum(1 for child in parameters.named_children if child.type not in _NON_PARAMETERS)
        enclosing = self._enclosing_class(node)
        self.emit(
            "function",
            node,
            {
                "name": self.text(node.child_by_field_name("name")),
                "annotation-names": self._decorators(node),
                "is-method": enclosing is not None,
                "is-async": any(child.type == "async" for child in node.children),
                "parameter-count": parameter_count,
                "return-type": self.text(node.child_by_field_name("return_type")) or None,
                "enclosing-class": enclosing,
            },
        )

    def _call(self, node: TSNode) -> None:
        function = node.child_by_field_name("function")
        callee = self.text(function)
        receiver: str | None = None
        if function is not None and function.type == "attribute":
            callee = self.text(function.child_by_field_name("attribute"))
            receiver = self.text(function.child_by_field_name("object"))
        arguments = node.child_by_field_name("arguments")
        argument_count = 0
        if arguments is not None:
            if arguments.type == "generator_expression":
                argument_count = 1
            else:
                argument_count = sum(1 for child in arguments.named_children if child.type != "comment")
        self.emit(
            "call",
            node,
            {"callee": callee, "receiver": receiver, "argument-count": argument_count},
        )

    def _try(self, node: TSNode) -> None:
        body = node.child_by_field_name("body")
        self.emit(
            "try",
            node,
            {
                "has-finally": first_child_of_type(node, "finally_clause") is not None,
                "catch-count": sum(1 for child in node.children if child.type in _EXCEPT_TYPES),
                "is-empty": body is None or all(_is_trivial_statement(child) for child in body.named_children),
                "has-resources": False,
            },
        )

    def _except(self, node: TSNode) -> None:
        block = first_child_of_type(node, "block")
        caught: list[str] = []
        for child in node.children:
            if child.type in ("as", ":") or child == block:
                break
            if not child.is_named or child.type == "comment":
                continue
            # ``except (A, B) as err`` wraps the types in an as_pattern.
            if child.type == "as_pattern":
                child = child.named_children[0]
            if child.type == "tuple":
                caught.extend(self.text(item) for item in child.named_children)
            else:
                caught.append(self.text(child))
        self.emit(
            "catch",
            node,
            {
                "caught-types": tuple(caught),
                "is-empty": block is None or all(_is_trivial_statement(child) for child in block.named_children),
                "is-bare": not caught,
                "rethrows": block is not None and has_descendant(block, "raise_statement"),
            },
        )

    def _string(self, node: TSNode) -> None:
        parts = [child for child in node.named_children if child.type == "string_content"]
        if parts:
            value = "".join(self.text(child) for child in parts)
        else:
            raw = self.text(node)
            match = _STRING_RE.match(raw)
            value = match.group("body") if match else ""
        self.emit(
            "string-literal",
            node,
            {"value": value, "length": len(value), "is-docstring": self._is_docstring(node)},
        )

    def _is_docstring(self, node: TSNode) -> bool:
        statement = node.parent
        if statement is None or statement.type != "expression_statement" or statement.named_child_count != 1:
            return False
        container = statement.parent
        if container is None or container.type not in ("module", "block"):
            return False
        for child in container.named_children:
            if child.type == "comment":
                continue
            return child == statement
        return False
