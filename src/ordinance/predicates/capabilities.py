"""Map predicates to the adapter capabilities they need."""

from __future__ import annotations

from ordinance.constants.capabilities import CAPABILITY_ATTRIBUTES, CAPABILITY_NODE_KINDS
from ordinance.predicates.quantifiers import UnitPredicate


def required_capabilities(predicate: UnitPredicate) -> frozenset[str]:
    """Return the capabilities an adapter must declare to evaluate *predicate*."""
    kinds = predicate.kinds()
    attributes = predicate.attributes()
    needed: set[str] = set()
    for capability, capability_kinds in CAPABILITY_NODE_KINDS.items():
        if kinds & capability_kinds:
            needed.add(capability)
    for capability, capability_attributes in CAPABILITY_ATTRIBUTES.items():
        if attributes & capability_attributes:
            needed.add(capability)
    return frozenset(needed)
