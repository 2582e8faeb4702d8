"""Status fetcher: run the probe command with a timeout, parse `<name> <value>` lines."""

import asyncio
import logging
import os
import signal
from typing import Dict, Sequence

from clustercheck.probe.errors import ProbeExecutionFailed, ProbeOutputMalformed, ProbeTimeout

logger = logging.getLogger(__name__)

# Variables whose value is free text and may contain spaces.
FREE_TEXT_VARIABLES = frozenset({"wsrep_local_state_comment"})

# Upper bound on reaping a killed probe; a child that escaped the process group can hold the pipes open.
REAP_TIMEOUT = 2.0


def parse_status_output(text: str) -> Dict[str, str]:
    """Parse probe stdout into a name -> value mapping.

    Each line is `<name><whitespace><value>` with exactly two tokens. Names in
    FREE_TEXT_VARIABLES take the rest of the line as the value, so
    "Joining: receiving State Transfer" stays whole. Blank lines are skipped;
    any other shape raises ProbeOutputMalformed.
    """
    values: Dict[str, str] = {}
    for line_no, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) > 2 and fields[0] in FREE_TEXT_VARIABLES:
            fields = line.split(None, 1)
        if len(fields) != 2:
            raise ProbeOutputMalformed(line_no, line)
        values[fields[0]] = fields[1].strip()
    return values


class StatusFetcher:
    """Runs one probe subprocess per fetch(); holds no state between calls.

    The probe runs in its own session so a timeout can kill everything it
    spawned, not only the direct child.
    """

    def __init__(self, command: Sequence[str], timeout: float):
        if not command:
            raise ValueError("probe command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    async def _kill(self, proc: asyncio.subprocess.Process) -> None:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            if proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
        try:
            await asyncio.wait_for(proc.wait(), timeout=REAP_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Probe pid %s not reaped within %.1fs after kill", proc.pid, REAP_TIMEOUT)

    async def fetch(self) -> Dict[str, str]:
        """Run the probe and return its parsed status. Raises FetchError subclasses."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ProbeExecutionFailed(str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.debug("Probe %s killed after %.1fs", self.command[0], self.timeout)
            raise ProbeTimeout() from None
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        err_text = stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise ProbeExecutionFailed(f"exit status {proc.returncode}", err_text)
        return parse_status_output(stdout.decode("utf-8", errors="replace"))


async def fetch_status(command: Sequence[str], timeout: float) -> Dict[str, str]:
    """One-shot fetch without keeping a StatusFetcher around."""
    return await StatusFetcher(command, timeout).fetch()
