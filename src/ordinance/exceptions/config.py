"""Configuration-related exceptions."""

from __future__ import annotations

from ordinance.exceptions.base import OrdinanceError


class ConfigError(OrdinanceError, ValueError):
    """Raised when engine configuration is invalid."""
