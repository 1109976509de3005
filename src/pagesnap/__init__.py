"""pagesnap — headless-browser URL screenshots over HTTP."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("pagesnap")
except Exception:
    __version__ = "0.0.0"
