"""Rule-set documents: schema checks, YAML loading, bundled rule sets."""

from .loader import (
    BUNDLED_DIR,
    bundled_rule_sets,
    load_rule_set_file,
    load_rule_sets,
    load_rule_sources,
    parse_rule_set,
)
from .schema import collect_rule_set_errors, validate_rule_set
from .validation import validate_rule_sources

__all__ = [
    "BUNDLED_DIR",
    "bundled_rule_sets",
    "collect_rule_set_errors",
    "load_rule_set_file",
    "load_rule_sets",
    "load_rule_sources",
    "parse_rule_set",
    "validate_rule_set",
    "validate_rule_sources",
]
