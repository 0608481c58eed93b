"""Language adapters that turn source text into structural units."""

from .base import LanguageAdapter
from .java import JavaAdapter
from .python import PythonAdapter
from .registry import (
    AdapterRegistry,
    adapter_for_path,
    default_adapters,
    get_adapter,
    registered_languages,
)

__all__ = [
    "AdapterRegistry",
    "JavaAdapter",
    "LanguageAdapter",
    "PythonAdapter",
    "adapter_for_path",
    "default_adapters",
    "get_adapter",
    "registered_languages",
]
