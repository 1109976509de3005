"""pagesnap exception hierarchy.

Every failure a capture can end with is one of the ``PagesnapError``
subclasses below, each tagged with a ``FailureKind``. Callers can match on
the class or on ``error.kind`` without inspecting message strings.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Closed set of capture failure kinds."""

    RESOLUTION = "resolution"
    LAUNCH = "launch"
    PAGE_CREATION = "page_creation"
    NAVIGATION = "navigation"
    CAPTURE = "capture"
    CLEANUP = "cleanup"


class PagesnapError(Exception):
    """Base exception for all pagesnap errors.

    Attributes:
        kind: The failure kind this error represents.
        message: Human-readable description of the failure.
    """

    kind: FailureKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ResolutionError(PagesnapError):
    """Raised when no browser executable could be resolved for the runtime mode."""

    kind = FailureKind.RESOLUTION


class LaunchError(PagesnapError):
    """Raised when the browser process fails to start."""

    kind = FailureKind.LAUNCH


class PageCreationError(PagesnapError):
    """Raised when the browser cannot open a page."""

    kind = FailureKind.PAGE_CREATION


class NavigationError(PagesnapError):
    """Raised when navigation times out or hits a network error.

    Attributes:
        url: The URL that failed to load.
        reason: Short description of why (e.g. ``"name not resolved"``).
    """

    kind = FailureKind.NAVIGATION

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class CaptureError(PagesnapError):
    """Raised when the screenshot itself cannot be taken."""

    kind = FailureKind.CAPTURE


class CleanupWarning(PagesnapError):
    """Resource release failure during teardown.

    Never raised to callers; built, logged and recorded on the session so the
    primary outcome of a capture is left untouched.

    Attributes:
        step: The teardown step that failed (``"page"``, ``"browser"``, ...).
    """

    kind = FailureKind.CLEANUP

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"Cleanup of {step} failed: {message}")
