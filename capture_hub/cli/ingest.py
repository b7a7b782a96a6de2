"""
Ingestion CLI Commands
======================

CLI commands for replaying webhook payloads and parsing sports feeds.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from capture_hub.core.errors import CaptureHubError
from capture_hub.ingestion.feed import parse_sports_feed
from capture_hub.ingestion.service import IngestionService
from capture_hub.ingestion.storage import SQLDocumentStore

console = Console()
ingest_app = typer.Typer(help="Ingestion pipeline commands")


def _read_file(path: Path) -> str:
    if not path.exists():
        rprint(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


@ingest_app.command("replay")
def replay_payload(
    payload_file: Path = typer.Argument(..., help="JSON file holding a webhook body"),
) -> None:
    """
    Run a stored webhook payload through the ingestion pipeline.

    Examples:
        capture-hub ingest replay delivery.json
    """
    try:
        payload = json.loads(_read_file(payload_file))
    except json.JSONDecodeError as e:
        rprint(f"[red]Error:[/red] Invalid JSON in {payload_file}: {e}")
        raise typer.Exit(1)

    from capture_hub.db.engine import init_db

    init_db()
    service = IngestionService(SQLDocumentStore())

    try:
        with console.status("[bold blue]Ingesting...[/bold blue]"):
            result = asyncio.run(service.process_webhook(payload))
    except CaptureHubError as e:
        rprint(f"[red]Error ({e.reason}):[/red] {e.message}")
        raise typer.Exit(1)

    rprint("[green]Ingestion complete[/green]")
    console.print_json(result.model_dump_json())


@ingest_app.command("feed")
def parse_feed(
    feed_file: Path = typer.Argument(..., help="Sports calendar XML feed"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """
    Parse a sports calendar feed and show the games.

    Examples:
        capture-hub ingest feed schedule.xml
        capture-hub ingest feed schedule.xml --json
    """
    try:
        games = parse_sports_feed(_read_file(feed_file))
    except CaptureHubError as e:
        rprint(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps([game.model_dump() for game in games]))
        return

    if not games:
        rprint("[yellow]No games found in feed[/yellow]")
        return

    table = Table(title=f"Games ({len(games)})")
    table.add_column("Date")
    table.add_column("Opponent", style="bold")
    table.add_column("Location")
    table.add_column("Score")

    for game in games:
        table.add_row(game.localStartDateTime or game.startDate, game.opponent, game.location, game.score or "-")

    console.print(table)
