"""Capture Hub CLI using Typer."""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from capture_hub import __version__
from capture_hub.cli.docs import docs_app
from capture_hub.cli.ingest import ingest_app
from capture_hub.logging_config import configure_logging

# Load .env file from current directory or project root
_env_paths = [
    Path.cwd() / ".env",
    Path(__file__).parent.parent.parent / ".env",
]
for _env_path in _env_paths:
    if _env_path.exists():
        load_dotenv(_env_path)
        break

app = typer.Typer(
    name="capture-hub",
    help="Capture Hub - webhook ingestion and browsing for scraped captures",
    add_completion=False,
)
app.add_typer(ingest_app, name="ingest")
app.add_typer(docs_app, name="docs")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level (overrides LOG_LEVEL)"),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level)


@app.command()
def run(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(
        False, "--reload", "-r", help="Enable auto-reload for development"
    ),
) -> None:
    """Start the Capture Hub web server."""
    import uvicorn

    typer.echo(f"Starting Capture Hub on http://{host}:{port}")
    typer.echo("Press Ctrl+C to stop the server")
    typer.echo("")

    uvicorn.run(
        "capture_hub.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@app.command()
def init_db() -> None:
    """Initialize the database (create tables)."""
    from capture_hub.db.engine import init_db as db_init

    typer.echo("Initializing database...")
    db_init()
    typer.echo("Database initialized successfully!")


@app.command()
def migrate() -> None:
    """Apply Alembic migrations up to the latest revision."""
    from capture_hub.db.engine import run_migrations

    typer.echo("Running migrations...")
    try:
        run_migrations()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo("Database is up to date.")


@app.command()
def version() -> None:
    """Show the Capture Hub version."""
    typer.echo(f"Capture Hub v{__version__}")


@app.command()
def check_config() -> None:
    """Check the current configuration status."""
    typer.echo("Capture Hub Configuration")
    typer.echo("=" * 40)

    env_found = False
    for _env_path in _env_paths:
        if _env_path.exists():
            typer.echo(f"  .env file: {_env_path}")
            env_found = True
            break
    if not env_found:
        typer.echo("  .env file: Not found")

    from capture_hub.db.engine import get_database_url

    typer.echo(f"  Database: {get_database_url()}")
    typer.echo(f"  Log level: {os.environ.get('LOG_LEVEL', 'INFO')}")
    typer.echo(f"  Log directory: {os.environ.get('LOG_DIR') or 'Not set (console only)'}")


if __name__ == "__main__":
    app()
