"""Capture state machine definitions.

One capture walks these states in order. Any working state can bail out:
before a browser exists the run goes straight to ``FAILED``, afterwards it
always passes through ``CLOSING`` first.
"""

from enum import Enum


class CaptureState(str, Enum):
    """Lifecycle states of a single screenshot request."""

    IDLE = "IDLE"
    RESOLVING = "RESOLVING"
    LAUNCHING = "LAUNCHING"
    PAGE_OPENING = "PAGE_OPENING"
    NAVIGATING = "NAVIGATING"
    CAPTURING = "CAPTURING"
    CLOSING = "CLOSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


TERMINAL_STATES = {CaptureState.SUCCEEDED, CaptureState.FAILED}

# States that own (or may own) browser resources and must pass through CLOSING
SESSION_STATES = {
    CaptureState.LAUNCHING,
    CaptureState.PAGE_OPENING,
    CaptureState.NAVIGATING,
    CaptureState.CAPTURING,
}

STATE_TRANSITIONS: dict[CaptureState, list[CaptureState]] = {
    CaptureState.IDLE: [CaptureState.RESOLVING],
    CaptureState.RESOLVING: [CaptureState.LAUNCHING, CaptureState.FAILED],
    CaptureState.LAUNCHING: [CaptureState.PAGE_OPENING, CaptureState.CLOSING],
    CaptureState.PAGE_OPENING: [CaptureState.NAVIGATING, CaptureState.CLOSING],
    CaptureState.NAVIGATING: [CaptureState.CAPTURING, CaptureState.CLOSING],
    CaptureState.CAPTURING: [CaptureState.CLOSING],
    CaptureState.CLOSING: [CaptureState.SUCCEEDED, CaptureState.FAILED],
    CaptureState.SUCCEEDED: [],
    CaptureState.FAILED: [],
}


def can_transition(current: CaptureState, target: CaptureState) -> bool:
    return target in STATE_TRANSITIONS[current]
