"""Single-use browser session with guaranteed teardown.

A ``BrowserSession`` owns one Chromium process (plus the Playwright driver
that talks to it) and at most one page. It is an async context manager:
entering launches the browser, leaving releases everything in a fixed order
(page, browser, Playwright driver, temporary profile directory) on every
exit path, including task cancellation.

Teardown is best-effort. Each release step is bounded by a timeout; a step
that fails is logged and recorded as a ``CleanupWarning`` but never raised,
so it cannot mask the outcome of the work done inside the ``async with``.

Usage::

    async with BrowserSession(profile) as session:
        page = await session.open_page()
        await page.goto(url)
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from pagesnap.browser.resolver import LaunchProfile
from pagesnap.exceptions import CleanupWarning, LaunchError, PageCreationError

logger = logging.getLogger(__name__)


class BrowserSession:
    """One browser process and its single page, scoped to one request.

    Args:
        profile: Resolved launch profile; consumed by this session only.
        headless: Run the browser without a display.
        base_args: Flags the environment always wants, placed before the
            profile's own flags.
        close_timeout_sec: Upper bound for each teardown step.
        playwright_factory: Callable returning an object with an async
            ``start()``; defaults to ``async_playwright``.
    """

    def __init__(
        self,
        profile: LaunchProfile,
        *,
        headless: bool = True,
        base_args: Sequence[str] = (),
        close_timeout_sec: float = 10.0,
        playwright_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.profile = profile
        self.headless = headless
        self.launch_args: list[str] = [*base_args, *profile.extra_args]
        self.cleanup_warnings: list[CleanupWarning] = []

        self._close_timeout = close_timeout_sec
        self._playwright_factory = playwright_factory or async_playwright
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None  # persistent context (local profile)
        self._page: Page | None = None
        self._page_requested = False
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.launch()
        except BaseException:
            await self._close_shielded()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._close_shielded()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_launched(self) -> bool:
        return self._browser is not None or self._context is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def page(self) -> Page | None:
        return self._page

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def launch(self) -> None:
        """Start Playwright and the browser process.

        Local profiles (with a user-data directory) go through
        ``launch_persistent_context``; everything else through ``launch``.

        Raises:
            LaunchError: If the driver or the browser fails to start.
            RuntimeError: If the session was already launched or closed.
        """
        if self._playwright is not None or self._closed:
            raise RuntimeError("BrowserSession is single-use")

        executable = self.profile.executable_path
        try:
            self._playwright = await self._playwright_factory().start()
            chromium = self._playwright.chromium
            if self.profile.user_data_dir:
                self._context = await chromium.launch_persistent_context(
                    self.profile.user_data_dir,
                    executable_path=executable,
                    headless=self.headless,
                    args=self.launch_args,
                )
            else:
                self._browser = await chromium.launch(
                    executable_path=executable,
                    headless=self.headless,
                    args=self.launch_args,
                )
        except Exception as exc:
            logger.error("Browser launch failed (%s): %s", executable, exc)
            raise LaunchError(f"Failed to launch browser at {executable}: {exc}") from exc

        logger.info(
            "Browser launched (mode=%s, headless=%s, args=%d)",
            self.profile.mode.value,
            self.headless,
            len(self.launch_args),
        )

    async def open_page(self) -> Page:
        """Open the session's one and only page.

        Raises:
            PageCreationError: If the browser cannot create the page.
            RuntimeError: If the session is not running or already has a page.
        """
        if not self.is_launched or self._closed:
            raise RuntimeError("BrowserSession is not running")
        if self._page_requested:
            raise RuntimeError("BrowserSession already opened its page")
        self._page_requested = True

        try:
            if self._context is not None:
                # A persistent context starts with one blank tab; use it.
                pages = self._context.pages
                self._page = pages[0] if pages else await self._context.new_page()
            else:
                self._page = await self._browser.new_page(viewport=self.profile.viewport)
        except Exception as exc:
            logger.error("Page creation failed: %s", exc)
            raise PageCreationError(f"Failed to open page: {exc}") from exc

        logger.debug("Page opened")
        return self._page

    async def close(self) -> None:
        """Release page, browser, driver and profile directory, in that order.

        Idempotent. Never raises; failures end up in ``cleanup_warnings``.
        """
        if self._closed:
            return
        self._closed = True

        if self._page is not None:
            await self._release("page", self._page.close)
        if self._context is not None:
            await self._release("browser", self._context.close)
        if self._browser is not None:
            await self._release("browser", self._browser.close)
        if self._playwright is not None:
            await self._release("playwright", self._playwright.stop)
        if self.profile.user_data_dir:
            await self._release(
                "profile_dir",
                lambda: asyncio.to_thread(shutil.rmtree, self.profile.user_data_dir),
            )

        logger.info("Browser session closed (%d cleanup warnings)", len(self.cleanup_warnings))

    async def _close_shielded(self) -> None:
        """Run ``close()`` to completion even if the calling task is cancelled."""
        task = asyncio.ensure_future(self.close())
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            await task
            raise

    async def _release(self, step: str, closer: Callable[[], Awaitable[Any]]) -> None:
        try:
            await asyncio.wait_for(closer(), timeout=self._close_timeout)
        except Exception as exc:
            warning = CleanupWarning(step, str(exc) or type(exc).__name__)
            self.cleanup_warnings.append(warning)
            logger.warning("%s", warning)
