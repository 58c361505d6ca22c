"""CLI commands for browsing recorded visits."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

history_app = typer.Typer(help="Inspect the visit history.")
console = Console()


@history_app.command("list")
def list_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of rows to show."),
    offset: int = typer.Option(0, "--offset", help="Rows to skip."),
) -> None:
    """Show the most recent visits."""
    from scout.store import build_history_store

    store = build_history_store()
    rows = store.list_entries(limit=limit, offset=offset)
    if not rows:
        console.print("[dim]No visits recorded yet.[/dim]")
        return

    table = Table(title=f"Visit history ({store.count()} total)")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Visited", style="dim")
    table.add_column("Title")
    table.add_column("URL", style="blue", overflow="fold")
    for row in rows:
        visited = row["visit_time"].strftime("%Y-%m-%d %H:%M:%S") if row["visit_time"] else ""
        table.add_row(str(row["id"]), visited, row["title"] or "", row["url"])
    console.print(table)


@history_app.command("show")
def show_entry(entry_id: int = typer.Argument(..., help="History row ID.")) -> None:
    """Show a single visit."""
    from scout.store import build_history_store

    row = build_history_store().get_entry(entry_id)
    if row is None:
        console.print(f"[red]✗[/red] No history row with ID {entry_id}")
        raise typer.Exit(code=1)
    console.print(f"[bold]{row['title'] or '(untitled)'}[/bold]")
    console.print(f"  URL:     {row['url']}")
    console.print(f"  Visited: {row['visit_time']}")
    console.print(f"  Screenshot stored: {'yes' if row['screenshot'] else 'no'}")
