"""Unit tests for pagesnap.browser.session: launch, single page, teardown."""

from __future__ import annotations

import asyncio
import os
import tempfile
from unittest.mock import AsyncMock

import pytest

from pagesnap.browser.resolver import LaunchProfile
from pagesnap.browser.session import BrowserSession
from pagesnap.exceptions import CleanupWarning, FailureKind, LaunchError, PageCreationError
from pagesnap.models.runtime import RuntimeMode

MANAGED_PROFILE = LaunchProfile(
    executable_path="/opt/chromium/chrome",
    extra_args=("--no-sandbox", "--window-size=1920,1080"),
    mode=RuntimeMode.MANAGED,
    window_size=(1920, 1080),
)


def _local_profile() -> LaunchProfile:
    return LaunchProfile(
        executable_path="/usr/bin/google-chrome",
        user_data_dir=tempfile.mkdtemp(prefix="pagesnap_test_"),
        mode=RuntimeMode.LOCAL,
    )


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------


class TestLaunch:
    """Browser start-up for both launch paths."""

    @pytest.mark.anyio
    async def test_managed_launch_args(self, fake_playwright) -> None:
        session = BrowserSession(
            MANAGED_PROFILE,
            base_args=["--disable-gpu"],
            playwright_factory=fake_playwright.factory,
        )
        async with session:
            assert session.is_launched

        fake_playwright.playwright.chromium.launch.assert_awaited_once_with(
            executable_path="/opt/chromium/chrome",
            headless=True,
            args=["--disable-gpu", "--no-sandbox", "--window-size=1920,1080"],
        )
        fake_playwright.playwright.chromium.launch_persistent_context.assert_not_awaited()

    @pytest.mark.anyio
    async def test_local_launch_uses_persistent_context(self, fake_playwright) -> None:
        profile = _local_profile()
        async with BrowserSession(profile, playwright_factory=fake_playwright.factory):
            pass

        fake_playwright.playwright.chromium.launch_persistent_context.assert_awaited_once_with(
            profile.user_data_dir,
            executable_path="/usr/bin/google-chrome",
            headless=True,
            args=[],
        )
        fake_playwright.playwright.chromium.launch.assert_not_awaited()

    @pytest.mark.anyio
    async def test_launch_failure_raises_launch_error_and_cleans_up(self, make_playwright) -> None:
        fake = make_playwright(launch_error=RuntimeError("spawn ENOENT"))
        profile = _local_profile()
        session = BrowserSession(profile, playwright_factory=fake.factory)

        with pytest.raises(LaunchError, match="spawn ENOENT") as excinfo:
            async with session:
                pytest.fail("body must not run when launch fails")

        assert excinfo.value.kind is FailureKind.LAUNCH
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert session.closed
        fake.playwright.stop.assert_awaited_once()
        assert not os.path.exists(profile.user_data_dir)

    @pytest.mark.anyio
    async def test_driver_start_failure(self, make_playwright) -> None:
        fake = make_playwright(start_error=OSError("driver missing"))
        session = BrowserSession(MANAGED_PROFILE, playwright_factory=fake.factory)

        with pytest.raises(LaunchError):
            async with session:
                pass

        assert session.closed
        assert not session.is_launched
        assert session.cleanup_warnings == []

    @pytest.mark.anyio
    async def test_single_use(self, fake_playwright) -> None:
        session = BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory)
        async with session:
            pass

        with pytest.raises(RuntimeError, match="single-use"):
            await session.launch()


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------


class TestOpenPage:
    """Exactly one page per session."""

    @pytest.mark.anyio
    async def test_managed_page_uses_window_viewport(self, fake_playwright) -> None:
        async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
            page = await session.open_page()

        assert page is fake_playwright.page
        fake_playwright.browser.new_page.assert_awaited_once_with(viewport={"width": 1920, "height": 1080})

    @pytest.mark.anyio
    async def test_local_page_reuses_initial_tab(self, fake_playwright) -> None:
        async with BrowserSession(_local_profile(), playwright_factory=fake_playwright.factory) as session:
            page = await session.open_page()

        assert page is fake_playwright.page
        fake_playwright.context.new_page.assert_not_awaited()

    @pytest.mark.anyio
    async def test_local_page_created_when_no_initial_tab(self, make_playwright) -> None:
        fake = make_playwright(initial_pages=0)
        async with BrowserSession(_local_profile(), playwright_factory=fake.factory) as session:
            await session.open_page()

        fake.context.new_page.assert_awaited_once()

    @pytest.mark.anyio
    async def test_second_page_rejected(self, fake_playwright) -> None:
        async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
            await session.open_page()
            with pytest.raises(RuntimeError, match="already opened"):
                await session.open_page()

        fake_playwright.browser.new_page.assert_awaited_once()

    @pytest.mark.anyio
    async def test_page_before_launch_rejected(self, fake_playwright) -> None:
        session = BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory)
        with pytest.raises(RuntimeError, match="not running"):
            await session.open_page()

    @pytest.mark.anyio
    async def test_page_failure_raises_and_browser_still_closed(self, make_playwright) -> None:
        fake = make_playwright(new_page_error=RuntimeError("Target closed"))

        with pytest.raises(PageCreationError, match="Target closed"):
            async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake.factory) as session:
                await session.open_page()

        fake.page.close.assert_not_awaited()
        fake.browser.close.assert_awaited_once()
        fake.playwright.stop.assert_awaited_once()


# ---------------------------------------------------------------------------
# Teardown
# ---------------------------------------------------------------------------


class TestTeardown:
    """Ordered, best-effort release on every exit path."""

    @pytest.mark.anyio
    async def test_release_order(self, fake_playwright) -> None:
        calls: list[str] = []
        fake_playwright.page.close.side_effect = lambda: calls.append("page")
        fake_playwright.browser.close.side_effect = lambda: calls.append("browser")
        fake_playwright.playwright.stop.side_effect = lambda: calls.append("playwright")

        async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
            await session.open_page()

        assert calls == ["page", "browser", "playwright"]

    @pytest.mark.anyio
    async def test_error_in_body_still_releases(self, fake_playwright) -> None:
        with pytest.raises(ValueError, match="boom"):
            async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
                await session.open_page()
                raise ValueError("boom")

        fake_playwright.page.close.assert_awaited_once()
        fake_playwright.browser.close.assert_awaited_once()

    @pytest.mark.anyio
    async def test_local_teardown_removes_profile_dir(self, fake_playwright) -> None:
        profile = _local_profile()
        async with BrowserSession(profile, playwright_factory=fake_playwright.factory) as session:
            await session.open_page()
            assert os.path.isdir(profile.user_data_dir)

        fake_playwright.page.close.assert_awaited_once()
        fake_playwright.context.close.assert_awaited_once()
        assert not os.path.exists(profile.user_data_dir)

    @pytest.mark.anyio
    async def test_cleanup_failure_is_recorded_not_raised(self, fake_playwright) -> None:
        fake_playwright.page.close.side_effect = RuntimeError("page already gone")

        async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
            await session.open_page()

        assert len(session.cleanup_warnings) == 1
        warning = session.cleanup_warnings[0]
        assert isinstance(warning, CleanupWarning)
        assert warning.kind is FailureKind.CLEANUP
        assert warning.step == "page"
        # Later steps still ran.
        fake_playwright.browser.close.assert_awaited_once()
        fake_playwright.playwright.stop.assert_awaited_once()

    @pytest.mark.anyio
    async def test_cleanup_failure_does_not_mask_primary_error(self, fake_playwright) -> None:
        fake_playwright.browser.close.side_effect = RuntimeError("kill failed")

        with pytest.raises(ValueError, match="primary"):
            async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
                await session.open_page()
                raise ValueError("primary")

        assert [w.step for w in session.cleanup_warnings] == ["browser"]

    @pytest.mark.anyio
    async def test_hanging_close_is_bounded(self, fake_playwright) -> None:
        async def hang() -> None:
            await asyncio.sleep(10)

        fake_playwright.browser.close = AsyncMock(side_effect=hang)

        async with BrowserSession(
            MANAGED_PROFILE,
            close_timeout_sec=0.05,
            playwright_factory=fake_playwright.factory,
        ) as session:
            await session.open_page()

        assert [w.step for w in session.cleanup_warnings] == ["browser"]
        fake_playwright.playwright.stop.assert_awaited_once()

    @pytest.mark.anyio
    async def test_close_is_idempotent(self, fake_playwright) -> None:
        session = BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory)
        async with session:
            await session.open_page()
        await session.close()

        fake_playwright.browser.close.assert_awaited_once()

    @pytest.mark.anyio
    async def test_cancellation_still_releases(self, fake_playwright) -> None:
        started = asyncio.Event()

        async def slow_goto(*args, **kwargs):
            started.set()
            await asyncio.sleep(10)

        fake_playwright.page.goto = AsyncMock(side_effect=slow_goto)

        async def run() -> None:
            async with BrowserSession(MANAGED_PROFILE, playwright_factory=fake_playwright.factory) as session:
                page = await session.open_page()
                await page.goto("https://example.com")

        task = asyncio.create_task(run())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        fake_playwright.page.close.assert_awaited_once()
        fake_playwright.browser.close.assert_awaited_once()
        fake_playwright.playwright.stop.assert_awaited_once()
