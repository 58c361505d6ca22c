"""CLI commands for inspecting and validating Scout settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate Scout configuration.")
console = Console()


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings."""
    from scout.settings import get_settings

    settings = get_settings()
    data = settings.model_dump(mode="json")
    if data["llm"].get("api_key"):
        data["llm"]["api_key"] = "***"
    console.print_json(json.dumps(data, indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings and report any issues."""
    from pydantic import ValidationError

    from scout.settings import get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)

    console.print("[green]✓[/green] Settings are valid.")
    console.print(f"  Environment: {settings.env}")
    console.print(f"  LLM provider: {settings.llm.provider} ({settings.llm.model})")
    console.print(f"  Headless: {settings.browser.headless}")
    console.print(f"  History DB: {settings.storage.db_url or settings.storage.sqlite_path}")
