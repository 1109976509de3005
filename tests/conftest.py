"""Shared fixtures for pagesnap unit and integration tests."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from pagesnap.models.capture import PNG_SIGNATURE

# Signature + a truncated IHDR chunk: enough for signature checks.
FAKE_PNG = PNG_SIGNATURE + b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    """Clear the settings LRU cache and mode flags between tests."""
    from pagesnap.settings.config import get_settings

    for var in ("IS_OFFLINE", "PAGESNAP_OFFLINE", "PAGESNAP_ENV"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def anyio_backend() -> str:
    """Playwright's async API only runs on asyncio."""
    return "asyncio"


# ---------------------------------------------------------------------------
# Fake Playwright
# ---------------------------------------------------------------------------


def make_fake_playwright(
    *,
    start_error: Exception | None = None,
    launch_error: Exception | None = None,
    new_page_error: Exception | None = None,
    goto_error: Exception | None = None,
    screenshot_error: Exception | None = None,
    screenshot: bytes = FAKE_PNG,
    initial_pages: int = 1,
) -> SimpleNamespace:
    """Build a Playwright stand-in with one browser, context and page.

    ``factory`` plays the role of ``async_playwright``; every other attribute
    is the mock the session will talk to, ready for ``assert_awaited*``.
    """
    page = MagicMock(name="page")
    page.goto = AsyncMock(return_value=MagicMock(status=200), side_effect=goto_error)
    page.screenshot = AsyncMock(return_value=screenshot, side_effect=screenshot_error)
    page.close = AsyncMock()

    browser = MagicMock(name="browser")
    browser.new_page = AsyncMock(return_value=page, side_effect=new_page_error)
    browser.close = AsyncMock()

    context = MagicMock(name="context")
    context.pages = [page] * initial_pages
    context.new_page = AsyncMock(return_value=page, side_effect=new_page_error)
    context.close = AsyncMock()

    playwright = MagicMock(name="playwright")
    playwright.chromium.launch = AsyncMock(return_value=browser, side_effect=launch_error)
    playwright.chromium.launch_persistent_context = AsyncMock(return_value=context, side_effect=launch_error)
    playwright.stop = AsyncMock()

    manager = MagicMock(name="playwright_manager")
    manager.start = AsyncMock(return_value=playwright, side_effect=start_error)

    return SimpleNamespace(
        factory=MagicMock(return_value=manager),
        manager=manager,
        playwright=playwright,
        browser=browser,
        context=context,
        page=page,
    )


@pytest.fixture()
def make_playwright():
    """The ``make_fake_playwright`` builder, for tests that need failures injected."""
    return make_fake_playwright


@pytest.fixture()
def fake_playwright() -> SimpleNamespace:
    """A healthy fake Playwright whose capture succeeds."""
    return make_fake_playwright()


@pytest.fixture()
def fake_distribution() -> MagicMock:
    """Managed-mode Chromium lookup that always finds a binary."""
    from pagesnap.browser.resolver import ChromiumDistribution

    dist = MagicMock(spec=ChromiumDistribution)
    dist.executable_path.return_value = "/opt/ms-playwright/chromium-1200/chrome-linux/chrome"
    dist.recommended_args = ("--disable-dev-shm-usage", "--disable-gpu")
    return dist


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that drive a real browser")
    config.addinivalue_line("markers", "slow: marks tests that take more than a few seconds")
