"""Unified CLI entry point for pagesnap.

Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> env vars (PAGESNAP_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

from typing import Optional

import typer

from pagesnap import __version__
from pagesnap.cli.capture_cmd import capture_url
from pagesnap.cli.settings_cmd import settings_app

APP_HELP = (
    "pagesnap: headless-browser screenshots of web pages. "
    "Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> env vars (PAGESNAP_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.command("capture")(capture_url)
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"pagesnap {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    from pagesnap.logging_config import configure_logging
    from pagesnap.settings import get_settings

    settings = get_settings()
    if debug:
        settings.log_level = "DEBUG"
    configure_logging(settings)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to api.host)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (defaults to api.port)."),
) -> None:
    """Run the screenshot HTTP API."""
    import uvicorn

    from pagesnap.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "pagesnap.api.app:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        log_config=None,
    )


if __name__ == "__main__":
    app()
