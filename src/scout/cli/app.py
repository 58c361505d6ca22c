"""Unified CLI entry point for Scout.

Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml ->
env vars (SCOUT_* with __) -> CLI flags.
"""

from __future__ import annotations

import typer

from scout.cli.history_cmd import history_app
from scout.cli.serve import serve
from scout.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("scout")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "scout: drive an automated browser from a web UI, optionally steered by an LLM. "
    "Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> "
    "env vars (SCOUT_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.command("serve")(serve)
app.add_typer(history_app, name="history")
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context, version: bool = typer.Option(False, "--version", help="Show version and exit.")) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"scout {VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
