"""Browser executable resolution.

Turns a ``RuntimeMode`` into a ``LaunchProfile``: which Chrome/Chromium
binary to start and with which extra flags and profile directory.

- ``LOCAL``: the system-installed Chrome at a fixed per-platform path and a
  fresh user-data directory under the OS temp dir.
- ``MANAGED``: the Chromium bundled with the host (Playwright's browser
  install root), run without a sandbox and with a fixed window size since
  serverless hosts usually run as root and have no display.

Usage::

    from pagesnap.browser.resolver import resolve_launch_profile

    profile = resolve_launch_profile(settings.runtime_mode, settings.browser)
"""

from __future__ import annotations

import logging
import os
import platform
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pagesnap.exceptions import ResolutionError
from pagesnap.models.runtime import RuntimeMode
from pagesnap.settings.config import BrowserSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Local Chrome locations
# ---------------------------------------------------------------------------

_LOCAL_CHROME_PATHS: dict[str, str] = {
    "Windows": "C:/Program Files/Google/Chrome/Application/chrome.exe",
    "Darwin": "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "Linux": "/usr/bin/google-chrome",
}

PROFILE_DIR_PREFIX = "pagesnap_profile_"

SANDBOX_DISABLING_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
)


def default_local_executable(system: str | None = None) -> str:
    """Return the conventional Chrome install path for *system* (defaults to this host)."""
    system = system or platform.system()
    return _LOCAL_CHROME_PATHS.get(system, _LOCAL_CHROME_PATHS["Linux"])


# ---------------------------------------------------------------------------
# Launch profile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LaunchProfile:
    """Everything needed to start one browser process.

    Built once per request by ``resolve_launch_profile()`` and handed to a
    single ``BrowserSession``.
    """

    executable_path: str
    extra_args: tuple[str, ...] = ()
    user_data_dir: str | None = None
    mode: RuntimeMode = RuntimeMode.MANAGED
    window_size: tuple[int, int] | None = None

    @property
    def viewport(self) -> dict[str, int] | None:
        if self.window_size is None:
            return None
        width, height = self.window_size
        return {"width": width, "height": height}


# ---------------------------------------------------------------------------
# Managed Chromium distribution
# ---------------------------------------------------------------------------

# Playwright browser layouts, most preferred first. ``*`` in the first path
# component is the browser revision.
_BINARY_PATTERNS: tuple[str, ...] = (
    "chromium_headless_shell-*/chrome-linux/headless_shell",
    "chromium_headless_shell-*/chrome-headless-shell-linux64/chrome-headless-shell",
    "chromium-*/chrome-linux/chrome",
    "chromium-*/chrome-linux64/chrome",
)

_REVISION_RE = re.compile(r"-(\d+)$")


class ChromiumDistribution:
    """Read-only view of a bundled Chromium install.

    Args:
        install_root: Directory holding the browser builds
            (Playwright's ``PLAYWRIGHT_BROWSERS_PATH``).
    """

    # Chromium flags for serverless containers.
    recommended_args: tuple[str, ...] = (
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--no-zygote",
        "--no-first-run",
        "--no-default-browser-check",
        "--disable-extensions",
        "--disable-background-networking",
        "--disable-background-timer-throttling",
        "--disable-renderer-backgrounding",
        "--disable-breakpad",
        "--hide-scrollbars",
        "--mute-audio",
        "--font-render-hinting=none",
    )

    def __init__(self, install_root: str | Path) -> None:
        self.install_root = Path(install_root)

    def executable_path(self) -> str:
        """Locate the newest usable Chromium binary under the install root.

        Raises:
            ResolutionError: If the root is missing or holds no executable build.
        """
        if not self.install_root.is_dir():
            raise ResolutionError(f"Chromium install root not found: {self.install_root}")

        for pattern in _BINARY_PATTERNS:
            candidates = sorted(self.install_root.glob(pattern), key=self._revision_of, reverse=True)
            for candidate in candidates:
                if candidate.is_file() and os.access(candidate, os.X_OK):
                    logger.debug("Resolved bundled Chromium: %s", candidate)
                    return str(candidate)

        raise ResolutionError(f"No executable Chromium build under {self.install_root}")

    def _revision_of(self, binary: Path) -> int:
        """Revision number from the ``<browser>-<rev>`` directory holding *binary*."""
        build_dir = binary.relative_to(self.install_root).parts[0]
        match = _REVISION_RE.search(build_dir)
        return int(match.group(1)) if match else -1


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_launch_profile(
    mode: RuntimeMode,
    settings: BrowserSettings | None = None,
    *,
    distribution: ChromiumDistribution | None = None,
) -> LaunchProfile:
    """Build the ``LaunchProfile`` for *mode*.

    Args:
        mode: Local development or managed execution.
        settings: Browser settings; defaults are used when omitted.
        distribution: Managed-mode Chromium lookup. Built from
            ``settings.install_root`` when omitted; never touched in local mode.

    Returns:
        A fresh ``LaunchProfile``. Local mode creates a new profile directory
        on every call.

    Raises:
        ResolutionError: If the managed distribution has no usable binary, or
            the local profile directory cannot be created.
    """
    settings = settings or BrowserSettings()

    if mode is RuntimeMode.LOCAL:
        executable = settings.local_executable or default_local_executable()
        try:
            user_data_dir = tempfile.mkdtemp(prefix=PROFILE_DIR_PREFIX)
        except OSError as exc:
            raise ResolutionError(f"Could not create browser profile directory: {exc}") from exc
        logger.info("Using local Chrome at %s (profile %s)", executable, user_data_dir)
        return LaunchProfile(
            executable_path=executable,
            user_data_dir=user_data_dir,
            mode=mode,
        )

    distribution = distribution or ChromiumDistribution(settings.install_root)
    try:
        executable = distribution.executable_path()
    except ResolutionError:
        raise
    except Exception as exc:
        raise ResolutionError(f"Chromium lookup failed: {exc}") from exc

    width, height = settings.window_width, settings.window_height
    extra_args = (
        *distribution.recommended_args,
        *SANDBOX_DISABLING_ARGS,
        f"--window-size={width},{height}",
    )
    logger.info("Using bundled Chromium at %s", executable)
    return LaunchProfile(
        executable_path=executable,
        extra_args=extra_args,
        mode=mode,
        window_size=(width, height),
    )
