"""Probe failures. Each maps to an unavailable verdict, never a crash."""

from clustercheck.core.verdict import VerdictReason


class FetchError(Exception):
    """Base class for status probe failures."""

    reason = VerdictReason.PROBE_EXECUTION_FAILED


class ProbeTimeout(FetchError):
    """Probe did not finish within the configured timeout and was killed."""

    reason = VerdictReason.PROBE_TIMEOUT

    def __init__(self, message: str = "Timed out waiting for status query to complete"):
        super().__init__(message)


class ProbeExecutionFailed(FetchError):
    """Probe exited non-zero or could not be started."""

    reason = VerdictReason.PROBE_EXECUTION_FAILED

    def __init__(self, detail: str, stderr: str = ""):
        self.detail = detail
        self.stderr = stderr
        super().__init__(f"Failed to get status: {detail} (stderr: {stderr!r})")


class ProbeOutputMalformed(FetchError):
    """A stdout line was not a `<name> <value>` pair."""

    reason = VerdictReason.PROBE_OUTPUT_MALFORMED

    def __init__(self, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(f"Malformed status output at line {line_no}: {line!r}")
