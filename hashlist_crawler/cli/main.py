"""Hashlist Crawler CLI using Typer."""

import logging
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

from hashlist_crawler import __version__
from hashlist_crawler.cli.crawl import crawl_app

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
    name="hashlist-crawler",
    help="Hashlist Crawler - ingest Debrid Media Manager hashlists into a torrent store",
    add_completion=False,
)
app.add_typer(crawl_app, name="crawl")


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="LOG_LEVEL", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Configure logging for every command."""
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def init_db() -> None:
    """Initialize the database (create tables)."""
    from hashlist_crawler.db.engine import init_db as db_init

    typer.echo("Initializing database...")
    db_init()
    typer.echo("Database initialized successfully!")


@app.command()
def migrate() -> None:
    """Upgrade the database schema with Alembic."""
    from hashlist_crawler.db.engine import run_migrations

    typer.echo("Running migrations...")
    run_migrations()
    typer.echo("Database is up to date")


@app.command()
def version() -> None:
    """Show the Hashlist Crawler version."""
    typer.echo(f"Hashlist Crawler v{__version__}")


@app.command()
def check_config() -> None:
    """Check the current configuration status."""
    from hashlist_crawler.db.engine import get_database_url
    from hashlist_crawler.ingestion.config import get_default_config

    typer.echo("Hashlist Crawler Configuration")
    typer.echo("=" * 40)

    env_found = False
    for _env_path in _env_paths:
        if _env_path.exists():
            typer.echo(f"  .env file: {_env_path}")
            env_found = True
            break
    if not env_found:
        typer.echo("  .env file: Not found")

    config_path = os.environ.get("HASHLIST_CONFIG_PATH", "config/crawler.yaml")
    typer.echo(f"  Config file: {config_path}")

    config = get_default_config()
    typer.echo(f"  Source tag: {config.hashlist.source}")
    typer.echo(f"  Manifest URL: {config.hashlist.manifest_url}")
    typer.echo(f"  Page base URL: {config.hashlist.download_base_url}")
    typer.echo(f"  GitHub token: {'configured' if config.http.github_token else 'Not configured'}")
    typer.echo(f"  Banned terms: {len(config.filters.banned_terms)}")
    typer.echo(f"  Concurrency: {config.concurrency}")
    typer.echo(f"  Fail fast: {config.fail_fast}")

    typer.echo(f"  Database: {get_database_url()}")


if __name__ == "__main__":
    app()
