"""State machine constants and transition logic for the remote job cycle.

One cycle covers a single submit -> poll -> fetch round trip. A story
sequence runs one cycle per scene, strictly one after another.
"""

# Job cycle states in execution order
JOB_STATES = {
    "submitting": "Sending the payload to the generation endpoint",
    "polling": "Waiting for the remote operation to finish",
    "fetching": "Downloading the first generated video",
    "done": "Result available",
    "failed": "Cycle aborted; a submitted remote job keeps running server-side",
}

# Allowed transitions out of each non-terminal state
JOB_TRANSITIONS = {
    "submitting": {"polling", "failed"},
    "polling": {"fetching", "failed"},
    "fetching": {"done", "failed"},
}

TERMINAL_STATES = {"done", "failed"}

INITIAL_STATE = "submitting"


def can_transition(current: str, target: str) -> bool:
    """Check whether the cycle may move from ``current`` to ``target``.

    Args:
        current: State the cycle is in
        target: State the cycle wants to enter

    Returns:
        True if the transition is allowed, False otherwise
    """
    return target in JOB_TRANSITIONS.get(current, set())


def is_terminal(state: str) -> bool:
    return state in TERMINAL_STATES
