"""Cooperative cancellation for evaluation runs."""

from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe flag checked before each file starts evaluating.

    Cancellation never interrupts a file mid-parse; files already running
    complete normally and the rest are reported as cancelled.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def reset(self) -> None:
        self._event.clear()
