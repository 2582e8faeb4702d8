"""Checker lifecycle: IDLE -> RUNNING -> STOPPING -> STOPPED, or IDLE -> STOPPED if stopped before start."""

import enum
import logging
from typing import Callable, Dict, FrozenSet, Optional

logger = logging.getLogger(__name__)


class CheckerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


_NEXT: Dict[CheckerState, FrozenSet[CheckerState]] = {
    CheckerState.IDLE: frozenset({CheckerState.RUNNING, CheckerState.STOPPED}),
    CheckerState.RUNNING: frozenset({CheckerState.STOPPING}),
    CheckerState.STOPPING: frozenset({CheckerState.STOPPED}),
    CheckerState.STOPPED: frozenset(),
}

TransitionListener = Callable[[CheckerState, CheckerState], None]


class CheckerStateMachine:
    """Tracks where a ClusterChecker is in its lifecycle.

    Moves are one-way; STOPPED is terminal. `listener(old, new)` is called
    after every applied move. A listener that raises does not undo the move.
    """

    def __init__(self, listener: Optional[TransitionListener] = None):
        self._state = CheckerState.IDLE
        self._listener = listener

    @property
    def current(self) -> CheckerState:
        return self._state

    def transition(self, new: CheckerState) -> bool:
        """Apply the move if allowed from the current state; False when rejected."""
        old = self._state
        if new not in _NEXT[old]:
            logger.warning("Checker cannot move %s -> %s", old.value, new.value)
            return False
        self._state = new
        if self._listener is not None:
            try:
                self._listener(old, new)
            except Exception:
                logger.exception("Lifecycle listener failed on %s -> %s", old.value, new.value)
        return True

    def is_running(self) -> bool:
        return self._state is CheckerState.RUNNING

    def request_stop(self) -> bool:
        if self._state is CheckerState.RUNNING:
            return self.transition(CheckerState.STOPPING)
        if self._state is CheckerState.IDLE:
            return self.transition(CheckerState.STOPPED)
        return False
