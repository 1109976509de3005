#!/usr/bin/env python3
"""Smoke test — capture a handful of URLs concurrently against a real browser.

Checks that every capture comes back as a PNG or a typed failure, and that
concurrent captures do not interfere with each other.

Usage:
    python scripts/smoke_capture.py
    python scripts/smoke_capture.py --url https://example.com --url https://httpbin.org/html
    IS_OFFLINE=true python scripts/smoke_capture.py   # local Chrome

Prerequisites:
    - Playwright browsers installed:
        playwright install chromium
      (set PAGESNAP_BROWSER__INSTALL_ROOT to the install dir in managed mode)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

# Ensure the source tree is importable when run from repo root
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from rich.console import Console
from rich.table import Table

from pagesnap.browser.capture import capture_screenshot
from pagesnap.exceptions import PagesnapError

DEFAULT_URLS = [
    "https://example.com",
    "https://httpbin.org/html",
    "http://10.255.255.1",  # non-routable: expect a navigation failure
]

console = Console()


async def _capture_one(url: str) -> tuple[str, str, str, float]:
    start = time.monotonic()
    try:
        image = await capture_screenshot(url)
    except PagesnapError as exc:
        return url, f"[red]{exc.kind.value}[/red]", exc.message, time.monotonic() - start
    size = len(image.to_bytes())
    status = "[green]ok[/green]" if image.is_png else "[yellow]not png[/yellow]"
    return url, status, f"{size} bytes", time.monotonic() - start


async def _run(urls: list[str]) -> list[tuple[str, str, str, float]]:
    return await asyncio.gather(*(_capture_one(u) for u in urls))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", action="append", dest="urls", help="URL to capture (repeatable).")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    results = asyncio.run(_run(args.urls or DEFAULT_URLS))

    table = Table(title="pagesnap smoke")
    table.add_column("URL")
    table.add_column("Result")
    table.add_column("Detail")
    table.add_column("Seconds", justify="right")
    for url, status, detail, elapsed in results:
        table.add_row(url, status, detail, f"{elapsed:.1f}")
    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
