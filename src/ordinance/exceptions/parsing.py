"""Parsing-related exceptions."""

from __future__ import annotations

from ordinance.exceptions.base import OrdinanceError


class ParseError(OrdinanceError, ValueError):
    """Raised when a language adapter cannot parse a source file."""

    def __init__(self, file: str, reason: str) -> None:
        super().__init__(f"{file}: {reason}")
        self.file = file
        self.reason = reason
