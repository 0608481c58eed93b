"""Tests for the Python structural adapter."""

from __future__ import annotations

import pytest

from ordinance.adapters import AdapterRegistry, PythonAdapter
from ordinance.constants.capabilities import CONSTRUCT_USAGE
from ordinance.exceptions import ParseError
from ordinance.model import StructuralUnit

MODULE = '''\
"""Billing helpers."""

from __future__ import annotations

import os, sys
import requests
from myapp.models import Invoice
from .local import helper
from typing import *


@dataclass(frozen=True)
class Ledger(Base, metaclass=Meta):
    async def total(self, currency, *rest, **options) -> int:
        print("total")
        return os.path.join("a", "b")


def loadAll():
    try:
        return requests.get(URL)
    except ValueError:
        pass
    except (KeyError, TypeError) as err:
        raise RuntimeError("boom") from err
    except:
        ...
    finally:
        helper()
'''


def _parse(adapters: AdapterRegistry, text: str = MODULE) -> StructuralUnit:
    return adapters.get_adapter("python").parse("myapp/billing.py", text)


def test_capabilities_exclude_construct_usage(adapters: AdapterRegistry) -> None:
    adapter = adapters.get_adapter("python")

    assert CONSTRUCT_USAGE not in adapter.capabilities
    assert adapter.missing_capabilities({CONSTRUCT_USAGE, "call-usage"}) == (CONSTRUCT_USAGE,)


def test_imports_split_per_name_and_grouped(adapters: AdapterRegistry) -> None:
    imports = _parse(adapters).nodes_of_kind("import")

    assert [node.get("module") for node in imports] == [
        "__future__",
        "os",
        "sys",
        "requests",
        "myapp.models",
        ".local",
        "typing",
    ]
    assert [node.get("import-group") for node in imports] == [
        "future",
        "stdlib",
        "stdlib",
        "third-party",
        "first-party",
        "local",
        "stdlib",
    ]
    assert [node.get("import-order-position") for node in imports] == [1, 2, 3, 4, 5, 6, 7]
    assert [node.get("is-wildcard") for node in imports][-1] is True
    assert not any(node.get("is-wildcard") for node in imports[:-1])


@pytest.mark.parametrize(
    ("module", "group"),
    [
        ("__future__", "future"),
        ("json", "stdlib"),
        ("os.path", "stdlib"),
        ("yaml", "third-party"),
        ("myapp", "first-party"),
        ("myapp.sub.mod", "first-party"),
        ("..pkg", "local"),
    ],
)
def test_import_group(adapters: AdapterRegistry, module: str, group: str) -> None:
    adapter = adapters.get_adapter("python")

    assert isinstance(adapter, PythonAdapter)
    assert adapter.import_group(module) == group


def test_class_node(adapters: AdapterRegistry) -> None:
    (ledger,) = _parse(adapters).nodes_of_kind("class")

    assert ledger.get("name") == "Ledger"
    assert ledger.get("annotation-names") == ("dataclass",)
    assert ledger.get("bases") == ("Base",)
    assert ledger.get("enclosing-class") is None


def test_function_nodes(adapters: AdapterRegistry) -> None:
    total, load_all = _parse(adapters).nodes_of_kind("function")

    assert total.get("name") == "total"
    assert total.get("is-method") is True
    assert total.get("is-async") is True
    assert total.get("parameter-count") == 4
    assert total.get("return-type") == "int"
    assert total.get("enclosing-class") == "Ledger"

    assert load_all.get("name") == "loadAll"
    assert load_all.get("is-method") is False
    assert load_all.get("is-async") is False
    assert load_all.get("parameter-count") == 0
    assert load_all.get("return-type") is None


def test_calls(adapters: AdapterRegistry) -> None:
    calls = _parse(adapters).nodes_of_kind("call")
    by_callee = {node.get("callee"): node for node in calls}

    assert by_callee["print"].get("receiver") is None
    assert by_callee["print"].get("argument-count") == 1
    assert by_callee["join"].get("receiver") == "os.path"
    assert by_callee["join"].get("argument-count") == 2
    assert by_callee["get"].get("receiver") == "requests"
    assert by_callee["dataclass"].get("argument-count") == 1


def test_try_and_except_shapes(adapters: AdapterRegistry) -> None:
    unit = _parse(adapters)
    (statement,) = unit.nodes_of_kind("try")
    value_error, grouped, bare = unit.nodes_of_kind("catch")

    assert statement.get("catch-count") == 3
    assert statement.get("has-finally") is True
    assert statement.get("is-empty") is False

    assert value_error.get("caught-types") == ("ValueError",)
    assert value_error.get("is-empty") is True
    assert value_error.get("is-bare") is False
    assert value_error.get("rethrows") is False

    assert grouped.get("caught-types") == ("KeyError", "TypeError")
    assert grouped.get("rethrows") is True
    assert grouped.get("is-empty") is False

    assert bare.get("caught-types") == ()
    assert bare.get("is-bare") is True
    assert bare.get("is-empty") is True


def test_string_literals_and_docstring(adapters: AdapterRegistry) -> None:
    strings = _parse(adapters).nodes_of_kind("string-literal")
    docstring = strings[0]

    assert docstring.get("value") == "Billing helpers."
    assert docstring.get("is-docstring") is True
    assert {node.get("value") for node in strings[1:]} >= {"total", "a", "b", "boom"}
    assert not any(node.get("is-docstring") for node in strings[1:])


def test_spans_are_one_based(adapters: AdapterRegistry) -> None:
    (ledger,) = _parse(adapters).nodes_of_kind("class")

    assert ledger.span.start_line == 13
    assert ledger.span.start_column == 1


def test_syntax_error_raises_parse_error(adapters: AdapterRegistry) -> None:
    with pytest.raises(ParseError, match="myapp/billing.py"):
        _parse(adapters, "def broken(:\n    return 1\n")
