"""
Document CLI Commands
=====================

CLI commands for inspecting stored capture documents.
"""

from __future__ import annotations

import json

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from capture_hub.core.errors import CaptureHubError
from capture_hub.db.engine import get_session
from capture_hub.services.document_service import DocumentService

console = Console()
docs_app = typer.Typer(help="Stored document commands")


@docs_app.callback()
def _ensure_tables() -> None:
    """Create tables on first use so an empty database lists as empty."""
    from capture_hub.db.engine import init_db

    init_db()


@docs_app.command("list")
def list_documents(
    collection: str = typer.Argument(..., help="Collection name, e.g. captured_lists"),
) -> None:
    """
    List document ids in a collection.

    Examples:
        capture-hub docs list captured_lists
    """
    with get_session() as session:
        try:
            document_ids = DocumentService(session).list_documents(collection)
        except CaptureHubError as e:
            rprint(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

    if not document_ids:
        rprint(f"[yellow]No documents in {collection}[/yellow]")
        return

    for document_id in document_ids:
        rprint(f"  • {document_id}")


@docs_app.command("show")
def show_document(
    collection: str = typer.Argument(..., help="Collection name"),
    document_id: str = typer.Argument(..., help="Document id, e.g. olemisssports.com"),
) -> None:
    """
    Print a stored document as JSON.

    Examples:
        capture-hub docs show captured_lists olemisssports.com
    """
    with get_session() as session:
        try:
            document = DocumentService(session).get_document(collection, document_id)
        except CaptureHubError as e:
            rprint(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

    console.print_json(json.dumps(document))


@docs_app.command("categories")
def show_categories(
    collection: str = typer.Argument(..., help="Collection name"),
    document_id: str = typer.Argument(..., help="Document id"),
) -> None:
    """
    Show the item categories of a document with their sizes.

    Examples:
        capture-hub docs categories captured_lists olemisssports.com
    """
    with get_session() as session:
        service = DocumentService(session)
        try:
            document = service.get_document(collection, document_id)
            categories = service.list_categories(collection, document_id)["categories"]
        except CaptureHubError as e:
            rprint(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

    table = Table(title=f"{collection}/{document_id}")
    table.add_column("Category", style="bold")
    table.add_column("Items", justify="right")

    for name in categories:
        table.add_row(name, str(len(document["data"][name])))

    console.print(table)
