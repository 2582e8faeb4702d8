"""Refresh loop: fetcher -> policy -> verdict cell, logging on comment change."""

import asyncio
import logging
from typing import Optional

from clustercheck.core.logging_utils import log_verdict_transition
from clustercheck.core.policy import PolicyConfig, evaluate
from clustercheck.core.verdict import Verdict, VerdictCell
from clustercheck.engine.state_machine import CheckerState, CheckerStateMachine
from clustercheck.probe.errors import FetchError
from clustercheck.probe.fetcher import StatusFetcher

logger = logging.getLogger(__name__)


class ClusterChecker:
    """Single writer of the current verdict. Iterations run one at a time."""

    def __init__(
        self,
        fetcher: StatusFetcher,
        policy: PolicyConfig,
        cell: Optional[VerdictCell] = None,
    ):
        self.fetcher = fetcher
        self.policy = policy
        self.cell = cell if cell is not None else VerdictCell()
        self._state_machine = CheckerStateMachine(listener=self._on_lifecycle)
        self._stop_event = asyncio.Event()
        self._checks_run = 0

    def _on_lifecycle(self, old: CheckerState, new: CheckerState) -> None:
        logger.info("Checker %s -> %s", old.value, new.value)

    @property
    def state(self) -> CheckerState:
        return self._state_machine.current

    @property
    def checks_run(self) -> int:
        return self._checks_run

    async def check_once(self) -> Verdict:
        """Fetch, evaluate and publish one verdict. Fetch errors become unavailable verdicts."""
        try:
            result = await self.fetcher.fetch()
        except FetchError as e:
            logger.debug("Probe failed: %s", e)
            result = e
        verdict = evaluate(result, self.policy)
        previous = self.cell.publish(verdict)
        self._checks_run += 1
        if previous.comment != verdict.comment:
            log_verdict_transition(previous, verdict, extra={"check": self._checks_run})
        return verdict

    async def _wait_interval(self) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.policy.check_interval)
        except asyncio.TimeoutError:
            pass

    async def run(self, initial_check: bool = True) -> None:
        """Check every check_interval until stop(). With initial_check, the first check runs immediately."""
        if not self._state_machine.transition(CheckerState.RUNNING):
            return
        logger.info(
            "Checker running (interval=%.1fs, timeout=%.1fs, donor=%s, readonly=%s)",
            self.policy.check_interval,
            self.policy.probe_timeout,
            self.policy.available_when_donor,
            self.policy.available_when_readonly,
        )
        try:
            if not initial_check:
                await self._wait_interval()
            while self._state_machine.is_running():
                try:
                    await self.check_once()
                except Exception as e:
                    logger.exception("Check iteration failed: %s", e)
                if not self._state_machine.is_running():
                    break
                await self._wait_interval()
        finally:
            if self._state_machine.current == CheckerState.RUNNING:
                self._state_machine.transition(CheckerState.STOPPING)
            self._state_machine.transition(CheckerState.STOPPED)
            logger.info("Checker stopped after %d checks", self._checks_run)

    def stop(self) -> None:
        self._state_machine.request_stop()
        self._stop_event.set()
