"""Configuration loading and normalization for Ordinance."""

from __future__ import annotations

from ordinance.config.fingerprint import config_fingerprint
from ordinance.config.loader import load_config
from ordinance.config.model import OrdinanceConfig

__all__ = ["OrdinanceConfig", "config_fingerprint", "load_config"]
