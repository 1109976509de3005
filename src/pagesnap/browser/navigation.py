"""Page navigation that waits for the page to settle.

Wraps Playwright's ``page.goto`` with ``wait_until="networkidle"`` (no
network connections for at least 500 ms) and turns every failure into a
``NavigationError`` chained to the Playwright cause. There is no retry or
weaker-strategy fallback: a page that never settles inside the timeout is a
failed capture.
"""

from __future__ import annotations

import logging
from typing import Literal

from playwright.async_api import Error as PlaywrightError, Page, Response, TimeoutError as PlaywrightTimeout

from pagesnap.exceptions import NavigationError

logger = logging.getLogger(__name__)

# Chromium net error codes worth reporting by name.
_NETWORK_ERROR_CODES: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_CONNECTION_TIMED_OUT",
    "ERR_ADDRESS_UNREACHABLE",
    "ERR_INTERNET_DISCONNECTED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_CERT_AUTHORITY_INVALID",
    "ERR_CERT_COMMON_NAME_INVALID",
    "ERR_TOO_MANY_REDIRECTS",
    "ERR_ABORTED",
)

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]


def describe_navigation_error(exc: BaseException) -> str:
    """Short, log-friendly reason for a failed ``page.goto``."""
    message = str(exc)
    for code in _NETWORK_ERROR_CODES:
        if code in message:
            return code.removeprefix("ERR_").replace("_", " ").lower()
    if "invalid url" in message.lower():
        return "invalid url"
    first_line = message.strip().splitlines()[0] if message.strip() else ""
    return first_line or type(exc).__name__


async def goto_settled(
    page: Page,
    url: str,
    *,
    timeout_ms: int = 30_000,
    wait_until: WaitUntil = "networkidle",
) -> Response | None:
    """Navigate *page* to *url* and wait until the network is idle.

    Args:
        page: Playwright page instance.
        url: Target URL, passed through unvalidated.
        timeout_ms: Upper bound for the whole navigation in milliseconds.
        wait_until: Playwright load state to wait for.

    Returns:
        The main-frame ``Response``, or ``None`` for responses Playwright
        does not report (``about:blank``, same-document navigations).

    Raises:
        NavigationError: On timeout, network error, or any other goto failure.
    """
    logger.debug("goto %s (wait_until=%s, timeout=%dms)", url, wait_until, timeout_ms)
    try:
        response = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightTimeout as exc:
        logger.warning("Navigation to %s timed out after %dms", url, timeout_ms)
        raise NavigationError(url, f"timed out after {timeout_ms}ms waiting for {wait_until}") from exc
    except PlaywrightError as exc:
        reason = describe_navigation_error(exc)
        logger.warning("Navigation to %s failed: %s", url, reason)
        raise NavigationError(url, reason) from exc
    except Exception as exc:
        logger.warning("Navigation to %s failed unexpectedly: %s", url, exc)
        raise NavigationError(url, describe_navigation_error(exc)) from exc

    if response is not None and response.status >= 400:
        # The page rendered an error document; it still gets captured.
        logger.info("Navigation to %s returned HTTP %d", url, response.status)
    return response
