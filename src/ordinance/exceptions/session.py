"""Evaluation session exceptions."""

from __future__ import annotations

from ordinance.exceptions.base import OrdinanceError


class StateTransitionError(OrdinanceError, RuntimeError):
    """Raised when a file's evaluation state is advanced along an illegal edge."""

    def __init__(self, file: str, current: str, target: str) -> None:
        super().__init__(f"{file}: illegal state transition {current} -> {target}")
        self.file = file
        self.current = current
        self.target = target
