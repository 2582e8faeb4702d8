"""Status probe: run the mysql client and parse its status output."""

from clustercheck.probe.errors import FetchError, ProbeExecutionFailed, ProbeOutputMalformed, ProbeTimeout
from clustercheck.probe.fetcher import StatusFetcher, fetch_status, parse_status_output

__all__ = [
    "FetchError",
    "ProbeTimeout",
    "ProbeExecutionFailed",
    "ProbeOutputMalformed",
    "StatusFetcher",
    "fetch_status",
    "parse_status_output",
]
