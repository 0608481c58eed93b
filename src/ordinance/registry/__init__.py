"""Rule registry: scope resolution, precedence, and policy versioning."""

from .builder import RuleRegistry, input_fingerprint
from .policy import EffectivePolicy, PolicyBundle

__all__ = ["EffectivePolicy", "PolicyBundle", "RuleRegistry", "input_fingerprint"]
