"""Policy evaluator: wsrep status snapshot (or probe error) -> Verdict.

State codes are compared as exact strings, as reported by the server:
4 = Synced, 2 = Donor/Desynced.
"""

from dataclasses import dataclass
from typing import Mapping, Union

from clustercheck.core.verdict import Verdict, VerdictReason
from clustercheck.probe.errors import FetchError

WSREP_LOCAL_STATE = "wsrep_local_state"
WSREP_LOCAL_STATE_COMMENT = "wsrep_local_state_comment"
READ_ONLY = "read_only"

STATE_SYNCED = "4"
STATE_DONOR = "2"
READ_ONLY_ON = "ON"

STATUS_VARIABLES = (READ_ONLY, WSREP_LOCAL_STATE, WSREP_LOCAL_STATE_COMMENT)


@dataclass(frozen=True)
class PolicyConfig:
    """Availability policy and timing. Immutable after startup."""

    available_when_donor: bool = False
    available_when_readonly: bool = False
    check_interval: float = 5.0
    probe_timeout: float = 10.0


def evaluate(result: Union[Mapping[str, str], FetchError], policy: PolicyConfig) -> Verdict:
    """Derive the verdict for one probe result. Pure: same input, same verdict."""
    if isinstance(result, FetchError):
        return Verdict(False, str(result), result.reason)

    local_state = result.get(WSREP_LOCAL_STATE)
    if local_state is None:
        return Verdict(False, "Unable to determine wsrep state", VerdictReason.STATE_VARIABLE_MISSING)

    available = local_state == STATE_SYNCED
    if policy.available_when_donor:
        available = available or local_state == STATE_DONOR

    # read_only wins over any wsrep state
    if not policy.available_when_readonly and result.get(READ_ONLY) == READ_ONLY_ON:
        return Verdict(False, "Read Only", VerdictReason.READ_ONLY_OVERRIDE)

    reason = VerdictReason.HEALTHY if available else VerdictReason.NOT_SYNCED
    return Verdict(available, result.get(WSREP_LOCAL_STATE_COMMENT, ""), reason)
