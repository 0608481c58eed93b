"""Language tags and source-file defaults."""

from __future__ import annotations

LANGUAGE_JAVA: str = "java"
LANGUAGE_PYTHON: str = "python"

JAVA_EXTENSIONS: tuple[str, ...] = (".java",)
PYTHON_EXTENSIONS: tuple[str, ...] = (".py", ".pyi")

# Annotations that mark a Java member as container-injected.
JAVA_INJECTION_ANNOTATIONS: frozenset[str] = frozenset({"Autowired", "Inject", "Resource"})
JAVA_STDLIB_PREFIXES: tuple[str, ...] = ("java.", "javax.")
# Leading package segments shared with the file's own package mark a project import.
JAVA_PROJECT_PACKAGE_DEPTH: int = 2

JAVA_IMPORT_GROUP_STATIC: str = "static"
JAVA_IMPORT_GROUP_STDLIB: str = "java"
JAVA_IMPORT_GROUP_PROJECT: str = "project"
JAVA_IMPORT_GROUP_THIRD_PARTY: str = "third-party"

PYTHON_IMPORT_GROUP_FUTURE: str = "future"
PYTHON_IMPORT_GROUP_STDLIB: str = "stdlib"
PYTHON_IMPORT_GROUP_THIRD_PARTY: str = "third-party"
PYTHON_IMPORT_GROUP_FIRST_PARTY: str = "first-party"
PYTHON_IMPORT_GROUP_LOCAL: str = "local"
