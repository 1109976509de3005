"""Data models shared across pagesnap."""

from pagesnap.models.capture import PNG_SIGNATURE, CapturedImage
from pagesnap.models.runtime import RuntimeMode
from pagesnap.models.states import (
    SESSION_STATES,
    STATE_TRANSITIONS,
    TERMINAL_STATES,
    CaptureState,
    can_transition,
)

__all__ = [
    "PNG_SIGNATURE",
    "SESSION_STATES",
    "STATE_TRANSITIONS",
    "TERMINAL_STATES",
    "CaptureState",
    "CapturedImage",
    "RuntimeMode",
    "can_transition",
]
