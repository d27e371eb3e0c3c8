import pytest

from veogen.orchestrator.state import (
    INITIAL_STATE,
    JOB_STATES,
    JOB_TRANSITIONS,
    can_transition,
    is_terminal,
)


def test_happy_path_is_allowed():
    path = [INITIAL_STATE, "polling", "fetching", "done"]
    for current, target in zip(path, path[1:]):
        assert can_transition(current, target)


@pytest.mark.parametrize("current", ["submitting", "polling", "fetching"])
def test_every_active_state_can_fail(current):
    assert can_transition(current, "failed")


@pytest.mark.parametrize("current, target", [
    ("submitting", "fetching"),
    ("polling", "submitting"),
    ("done", "failed"),
    ("failed", "polling"),
])
def test_invalid_transitions(current, target):
    assert not can_transition(current, target)


def test_terminal_states_have_no_exits():
    for state in JOB_STATES:
        assert is_terminal(state) == (state not in JOB_TRANSITIONS)
