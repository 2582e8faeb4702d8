"""Checker daemon: state machine, refresh loop, and process wiring."""

from .state_machine import CheckerState, CheckerStateMachine
from .checker import ClusterChecker
from .daemon import run_daemon

__all__ = ["CheckerState", "CheckerStateMachine", "ClusterChecker", "run_daemon"]
