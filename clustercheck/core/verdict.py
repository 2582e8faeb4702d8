"""Verdict: published availability decision, plus the cell that holds the current one."""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class VerdictReason(str, enum.Enum):
    """Why a verdict is what it is."""

    INITIALIZING = "initializing"
    PROBE_TIMEOUT = "probe_timeout"
    PROBE_EXECUTION_FAILED = "probe_execution_failed"
    PROBE_OUTPUT_MALFORMED = "probe_output_malformed"
    STATE_VARIABLE_MISSING = "state_variable_missing"
    READ_ONLY_OVERRIDE = "read_only_override"
    NOT_SYNCED = "not_synced"
    MANUAL_OVERRIDE = "manual_override"
    HEALTHY = "healthy"


@dataclass(frozen=True)
class Verdict:
    """Immutable health verdict. Replaced wholesale, never mutated."""

    available: bool
    comment: str
    reason: VerdictReason

    @property
    def status_code(self) -> int:
        return 200 if self.available else 503


INITIAL_VERDICT = Verdict(available=False, comment="Initializing", reason=VerdictReason.INITIALIZING)


class VerdictCell:
    """Thread-safe holder of the current verdict: one writer (checker), many readers (HTTP)."""

    def __init__(self, initial: Optional[Verdict] = None):
        self._lock = threading.Lock()
        self._verdict = initial if initial is not None else INITIAL_VERDICT

    def get(self) -> Verdict:
        with self._lock:
            return self._verdict

    def publish(self, verdict: Verdict) -> Verdict:
        """Swap in verdict and return the one it replaced."""
        with self._lock:
            previous = self._verdict
            self._verdict = verdict
            return previous
