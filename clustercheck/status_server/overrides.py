"""Manual override markers: files whose mere existence forces the health response."""

import os
from dataclasses import dataclass
from typing import Optional

from clustercheck.core.verdict import Verdict, VerdictReason

FORCE_UP_MESSAGE = "Cluster node OK by manual override"
FORCE_FAIL_MESSAGE = "Cluster node unavailable by manual override"


@dataclass(frozen=True)
class OverrideMarkers:
    """Paths checked on every request. An empty path disables that marker."""

    force_up_file: str = "/dev/shm/proxyon"
    force_fail_file: str = "/dev/shm/proxyoff"

    def evaluate(self) -> Optional[Verdict]:
        """Return the forced verdict, or None when no marker is present. Force-up wins."""
        if self.force_up_file and os.path.exists(self.force_up_file):
            return Verdict(True, FORCE_UP_MESSAGE, VerdictReason.MANUAL_OVERRIDE)
        if self.force_fail_file and os.path.exists(self.force_fail_file):
            return Verdict(False, FORCE_FAIL_MESSAGE, VerdictReason.MANUAL_OVERRIDE)
        return None
