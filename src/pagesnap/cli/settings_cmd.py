"""CLI commands for inspecting and validating pagesnap settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate pagesnap configuration.")
console = Console()


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings."""
    from pagesnap.settings import get_settings

    settings = get_settings()
    data = settings.model_dump(mode="json")
    data["runtime_mode"] = settings.runtime_mode.value
    console.print_json(json.dumps(data, indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings and report any issues."""
    from pagesnap.settings import get_settings

    try:
        settings = get_settings()
        console.print("[green]✓[/green] Settings are valid.")
        console.print(f"  Environment: {settings.env}")
        console.print(f"  Runtime mode: {settings.runtime_mode.value}")
        console.print(f"  Navigation timeout: {settings.browser.timeout_ms}ms")
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)
