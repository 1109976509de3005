"""Playwright-based screenshot capture.

``capture_screenshot(url)`` runs one full request: resolve the browser
executable, launch a fresh session, open one page, navigate until the
network is idle, take a full-page PNG and tear everything down. Each request
gets its own ``ScreenshotCapturer``; nothing is shared between requests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from playwright.async_api import Page

from pagesnap.browser.navigation import goto_settled
from pagesnap.browser.resolver import ChromiumDistribution, resolve_launch_profile
from pagesnap.browser.session import BrowserSession
from pagesnap.exceptions import CaptureError
from pagesnap.models.capture import PNG_SIGNATURE, CapturedImage
from pagesnap.models.runtime import RuntimeMode
from pagesnap.models.states import CaptureState, can_transition
from pagesnap.settings import Settings, get_settings

logger = logging.getLogger(__name__)


async def take_screenshot(page: Page) -> bytes:
    """Full-page PNG of the current page state.

    Raises:
        CaptureError: If Playwright fails or returns something that is not a PNG.
    """
    try:
        png_bytes = await page.screenshot(full_page=True, type="png")
    except Exception as exc:
        logger.error("Screenshot failed: %s", exc)
        raise CaptureError(f"Screenshot failed: {exc}") from exc

    if not png_bytes or not png_bytes.startswith(PNG_SIGNATURE):
        raise CaptureError("Screenshot did not produce PNG data")
    return png_bytes


class ScreenshotCapturer:
    """Drives a single capture through the ``CaptureState`` machine.

    Configuration is read from ``pagesnap.settings.get_settings()`` at
    construction time unless *settings* is given. An instance captures
    exactly one URL; create a new one per request.

    Args:
        settings: Settings to use instead of the cached singleton.
        mode: Runtime mode override; defaults to ``settings.runtime_mode``.
        distribution: Managed-mode Chromium lookup override.
        playwright_factory: Passed through to ``BrowserSession``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        mode: RuntimeMode | None = None,
        distribution: ChromiumDistribution | None = None,
        playwright_factory: Callable[[], Any] | None = None,
    ) -> None:
        s = settings or get_settings()

        self.mode: RuntimeMode = mode or s.runtime_mode
        self._browser_settings = s.browser
        self._distribution = distribution
        self._playwright_factory = playwright_factory

        self.state = CaptureState.IDLE
        self.history: list[CaptureState] = [CaptureState.IDLE]
        self.session: BrowserSession | None = None

    def _advance(self, target: CaptureState) -> None:
        if not can_transition(self.state, target):
            raise RuntimeError(f"Illegal capture transition {self.state.value} -> {target.value}")
        logger.debug("Capture state %s -> %s", self.state.value, target.value)
        self.state = target
        self.history.append(target)

    async def capture(self, url: str) -> CapturedImage:
        """Capture a full-page screenshot of *url*.

        Raises:
            ValueError: If *url* is empty.
            ResolutionError: No browser executable for the runtime mode.
            LaunchError: The browser process failed to start.
            PageCreationError: The browser could not open a page.
            NavigationError: The page did not load or settle in time.
            CaptureError: The screenshot could not be taken.
        """
        if not url:
            raise ValueError("url must be a non-empty string")
        if self.state is not CaptureState.IDLE:
            raise RuntimeError("ScreenshotCapturer runs exactly one capture")

        browser = self._browser_settings

        self._advance(CaptureState.RESOLVING)
        try:
            profile = resolve_launch_profile(self.mode, browser, distribution=self._distribution)
        except Exception as exc:
            logger.error("Executable resolution failed (mode=%s): %s", self.mode.value, exc)
            self._advance(CaptureState.FAILED)
            raise

        self._advance(CaptureState.LAUNCHING)
        self.session = BrowserSession(
            profile,
            headless=browser.headless,
            base_args=browser.base_args,
            close_timeout_sec=browser.close_timeout_sec,
            playwright_factory=self._playwright_factory,
        )

        try:
            async with self.session as session:
                try:
                    self._advance(CaptureState.PAGE_OPENING)
                    page = await session.open_page()

                    self._advance(CaptureState.NAVIGATING)
                    await goto_settled(page, url, timeout_ms=browser.timeout_ms)

                    self._advance(CaptureState.CAPTURING)
                    png_bytes = await take_screenshot(page)
                finally:
                    self._advance(CaptureState.CLOSING)
        except (Exception, asyncio.CancelledError) as exc:
            if self.state is not CaptureState.CLOSING:
                # Launch failed; the session released itself on the way out.
                self._advance(CaptureState.CLOSING)
            self._advance(CaptureState.FAILED)
            kind = getattr(exc, "kind", None)
            logger.error(
                "Capture of %s failed (%s): %s",
                url,
                kind.value if kind is not None else type(exc).__name__,
                exc,
            )
            raise

        self._advance(CaptureState.SUCCEEDED)
        logger.info("Screenshot captured for %s (%d bytes)", url, len(png_bytes))
        return CapturedImage.from_png(png_bytes, url=url)


async def capture_screenshot(
    url: str,
    *,
    mode: RuntimeMode | None = None,
    settings: Settings | None = None,
) -> CapturedImage:
    """Capture *url* in a fresh, single-use browser session.

    See ``ScreenshotCapturer.capture`` for the failure types raised.
    """
    capturer = ScreenshotCapturer(settings, mode=mode)
    return await capturer.capture(url)
