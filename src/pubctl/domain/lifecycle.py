"""Publish cycle lifecycle — states and the transitions between them.

One cycle walks ``parsing -> validating -> registering -> resolving ->
publishing -> done``. ``failed`` is reachable from every non-terminal
state. ``done`` and ``failed`` are terminal, and no state is entered twice
within a cycle. A rebuild starts a new cycle rather than resetting one.
"""

from __future__ import annotations

from enum import StrEnum

from pubctl.domain.errors import InvalidTransitionError


class CycleState(StrEnum):
    """States of a single publish cycle."""

    PARSING = "parsing"
    VALIDATING = "validating"
    REGISTERING = "registering"
    RESOLVING = "resolving"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


CYCLE_TRANSITIONS: dict[str, list[str]] = {
    "parsing": ["validating", "failed"],
    "validating": ["registering", "failed"],
    "registering": ["resolving", "failed"],
    "resolving": ["publishing", "failed"],
    "publishing": ["done", "failed"],
    "done": [],
    "failed": [],
}

TERMINAL_STATES = frozenset({CycleState.DONE, CycleState.FAILED})


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


class CycleTracker:
    """Tracks the state of one publish cycle and enforces its transitions."""

    def __init__(self) -> None:
        self._state = CycleState.PARSING
        self._history: list[CycleState] = [CycleState.PARSING]

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def history(self) -> tuple[CycleState, ...]:
        return tuple(self._history)

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    def advance(self, target: CycleState) -> None:
        """Move to *target*.

        Raises:
            InvalidTransitionError: If the transition map forbids it.
        """
        if not is_valid_transition(self._state, target, CYCLE_TRANSITIONS):
            raise InvalidTransitionError(str(self._state), str(target))
        self._state = target
        self._history.append(target)

    def fail(self) -> None:
        """Move to ``failed`` unless the cycle already ended."""
        if not self.is_terminal:
            self.advance(CycleState.FAILED)
