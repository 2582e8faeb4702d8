"""Checker lifecycle state machine: valid and invalid transitions, request_stop, listeners."""

import pytest

import clustercheck.engine.state_machine as state_machine_module
from clustercheck.engine.state_machine import CheckerState, CheckerStateMachine

_NEXT = state_machine_module._NEXT


def test_every_state_has_transition_entry():
    for state in CheckerState:
        assert state in _NEXT


def test_stopped_is_terminal():
    assert not _NEXT[CheckerState.STOPPED]


def test_normal_lifecycle():
    seen = []
    sm = CheckerStateMachine(listener=lambda a, b: seen.append((a, b)))
    assert sm.current == CheckerState.IDLE
    assert sm.transition(CheckerState.RUNNING)
    assert sm.is_running()
    assert sm.request_stop()
    assert sm.current == CheckerState.STOPPING
    assert sm.transition(CheckerState.STOPPED)
    assert seen == [
        (CheckerState.IDLE, CheckerState.RUNNING),
        (CheckerState.RUNNING, CheckerState.STOPPING),
        (CheckerState.STOPPING, CheckerState.STOPPED),
    ]


def test_request_stop_from_idle_goes_straight_to_stopped():
    sm = CheckerStateMachine()
    assert sm.request_stop()
    assert sm.current == CheckerState.STOPPED
    assert sm.request_stop() is False


@pytest.mark.parametrize(
    "path,bad",
    [
        ([], CheckerState.STOPPING),
        ([CheckerState.RUNNING], CheckerState.IDLE),
        ([CheckerState.RUNNING], CheckerState.STOPPED),
        ([CheckerState.STOPPED], CheckerState.RUNNING),
    ],
)
def test_invalid_transitions_rejected(path, bad):
    sm = CheckerStateMachine()
    for state in path:
        assert sm.transition(state)
    before = sm.current
    assert sm.transition(bad) is False
    assert sm.current == before


def test_listener_error_does_not_block_transition():
    def boom(a, b):
        raise RuntimeError("listener failed")

    sm = CheckerStateMachine(listener=boom)
    assert sm.transition(CheckerState.RUNNING)
    assert sm.current == CheckerState.RUNNING
