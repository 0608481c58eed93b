"""Root of the Ordinance exception hierarchy."""

from __future__ import annotations


class OrdinanceError(Exception):
    """Base class for all errors raised by Ordinance."""
