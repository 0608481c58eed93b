"""Per-file evaluation state machine.

    pending -> parsing -> matching -> done
    pending -> parsing -> parse-failed
    pending -> cache-hit -> done
    pending -> cancelled
"""

from __future__ import annotations

from ordinance.exceptions import StateTransitionError

STATE_PENDING: str = "pending"
STATE_PARSING: str = "parsing"
STATE_MATCHING: str = "matching"
STATE_DONE: str = "done"
STATE_PARSE_FAILED: str = "parse-failed"
STATE_CACHE_HIT: str = "cache-hit"
STATE_CANCELLED: str = "cancelled"

TRANSITIONS: dict[str, frozenset[str]] = {
    STATE_PENDING: frozenset({STATE_PARSING, STATE_CACHE_HIT, STATE_CANCELLED}),
    STATE_PARSING: frozenset({STATE_MATCHING, STATE_PARSE_FAILED}),
    STATE_MATCHING: frozenset({STATE_DONE}),
    STATE_CACHE_HIT: frozenset({STATE_DONE}),
    STATE_DONE: frozenset(),
    STATE_PARSE_FAILED: frozenset(),
    STATE_CANCELLED: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(state for state, targets in TRANSITIONS.items() if not targets)


class FileStateMachine:
    """Tracks one file through evaluation. Owned by a single worker."""

    def __init__(self, file: str) -> None:
        self.file = file
        self.state = STATE_PENDING
        self.history: list[str] = [STATE_PENDING]

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, target: str) -> None:
        if target not in TRANSITIONS.get(self.state, frozenset()):
            raise StateTransitionError(self.file, self.state, target)
        self.state = target
        self.history.append(target)
