"""Runtime mode selection."""

from __future__ import annotations

from enum import Enum


class RuntimeMode(str, Enum):
    """Where the browser runs.

    ``LOCAL`` uses a system-installed Chrome with a throwaway profile;
    ``MANAGED`` uses the bundled Chromium of a serverless / container host.
    """

    LOCAL = "local"
    MANAGED = "managed"

    @classmethod
    def from_flag(cls, value: str | bool | None) -> "RuntimeMode":
        """Map the offline flag to a mode: exactly ``true`` means local, anything else managed."""
        if isinstance(value, bool):
            return cls.LOCAL if value else cls.MANAGED
        if value is not None and value.strip().lower() == "true":
            return cls.LOCAL
        return cls.MANAGED
