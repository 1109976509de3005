"""CLI command for capturing a single URL."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

console = Console()


def capture_url(
    url: str = typer.Argument(..., help="The URL to capture."),
    output: Path = typer.Option(Path("screenshot.png"), "--output", "-o", help="Where to write the screenshot."),
    local: Optional[bool] = typer.Option(
        None,
        "--local/--managed",
        help="Force the local Chrome or the bundled Chromium (default: from IS_OFFLINE).",
    ),
    as_html: bool = typer.Option(False, "--html", help="Write the <img> HTML fragment instead of a PNG."),
) -> None:
    """Capture a full-page screenshot of URL."""
    from pagesnap.browser.capture import capture_screenshot
    from pagesnap.exceptions import PagesnapError
    from pagesnap.models.runtime import RuntimeMode

    mode = None if local is None else RuntimeMode.from_flag(local)

    console.print(Panel(f"[bold]Capturing:[/bold] {url}", title="pagesnap", border_style="blue"))

    try:
        with console.status("Rendering page..."):
            image = asyncio.run(capture_screenshot(url, mode=mode))
    except PagesnapError as e:
        console.print(f"[red]✗[/red] Capture failed ({e.kind.value}): {e.message}")
        raise typer.Exit(code=1)

    output.parent.mkdir(parents=True, exist_ok=True)
    if as_html:
        output.write_text(image.to_html(), encoding="utf-8")
    else:
        output.write_bytes(image.to_bytes())
    console.print(f"[green]✓[/green] Screenshot saved to: {output}")
