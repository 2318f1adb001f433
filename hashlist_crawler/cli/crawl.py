"""
Crawl CLI Commands
==================

CLI commands for running the hashlist crawl and inspecting the page ledger.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from hashlist_crawler.core.enums import RunStatus
from hashlist_crawler.db.engine import get_session, init_db
from hashlist_crawler.db.repositories import IngestedPageRepository
from hashlist_crawler.ingestion.codec import decode_payload, extract_encoded_payload
from hashlist_crawler.ingestion.config import CrawlerConfig, get_default_config
from hashlist_crawler.ingestion.errors import PayloadDecodeError
from hashlist_crawler.ingestion.jobs import build_classifier, crawl_hashlists

console = Console()
crawl_app = typer.Typer(help="Hashlist crawl commands")
pages_app = typer.Typer(help="Page ledger commands")

crawl_app.add_typer(pages_app, name="pages")


def _load_config(config_path: Optional[Path]) -> CrawlerConfig:
    if config_path is None:
        return get_default_config()
    try:
        return CrawlerConfig.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@crawl_app.command("run")
def run_crawl(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Crawler config file"),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", help="Pages processed in parallel (default from config)"
    ),
    fail_fast: bool = typer.Option(False, "--fail-fast", help="Abort on the first undecodable page"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum manifest entries to process"),
) -> None:
    """
    Crawl the hashlist repository once.

    Examples:
        hashlist-crawler crawl run
        hashlist-crawler crawl run --limit 20 --fail-fast
    """
    config = _load_config(config_path)
    if concurrency is not None:
        if concurrency < 1:
            rprint("[red]Error:[/red] --concurrency must be at least 1")
            raise typer.Exit(1)
        config.concurrency = concurrency
    if fail_fast:
        config.fail_fast = True

    init_db()

    rprint(f"\n[bold]Starting hashlist crawl for source:[/bold] {config.hashlist.source}")
    rprint(f"  Manifest: {config.hashlist.manifest_url}")
    rprint(f"  Concurrency: {config.concurrency}")
    if limit:
        rprint(f"  Max pages: {limit}")
    if not config.http.github_token:
        rprint("[yellow]Warning:[/yellow] GITHUB_PAT not set, GitHub may rate limit the manifest request")

    with console.status("[bold blue]Crawling...[/bold blue]"):
        stats = asyncio.run(crawl_hashlists(config=config, limit=limit))

    _display_run_stats(stats.to_dict())

    if stats.status == RunStatus.FAILED:
        raise typer.Exit(1)


@crawl_app.command("decode")
def decode_page(
    page_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved hashlist page"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Crawler config file"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum rows to display"),
) -> None:
    """
    Decode a saved hashlist page without touching the database.

    Examples:
        hashlist-crawler crawl decode page.html
    """
    config = _load_config(config_path)
    encoded = extract_encoded_payload(page_file.read_text(encoding="utf-8"))

    if encoded is None:
        rprint("[red]Error:[/red] No hashlist iframe found in page")
        raise typer.Exit(1)
    if not encoded:
        rprint("[red]Error:[/red] Hashlist iframe has an empty payload")
        raise typer.Exit(1)

    try:
        items = decode_payload(encoded)
    except PayloadDecodeError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    records = build_classifier(config).classify_many(items)

    rprint(f"\nDecoded {len(items)} rows, {len(records)} accepted\n")

    table = Table(title="Accepted Torrents")
    table.add_column("Category", style="bold")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Info Hash")

    for record in records[:limit]:
        table.add_row(record.category.value, record.name, record.size, record.info_hash)

    console.print(table)
    if len(records) > limit:
        rprint(f"[dim]... and {len(records) - limit} more[/dim]")


# Pages subcommands


@pages_app.command("status")
def page_status(
    name: str = typer.Argument(..., help="Manifest path of the page"),
) -> None:
    """
    Show whether a page has been ingested.

    Examples:
        hashlist-crawler crawl pages status 0a1b2c.html
    """
    init_db()
    with get_session() as session:
        page = IngestedPageRepository(session).get(name)

    if page is None:
        rprint(f"[yellow]Page '{name}' has not been ingested[/yellow]")
        raise typer.Exit(1)

    rprint(f"[green]Page '{name}' ingested at {page.ingested_at:%Y-%m-%d %H:%M:%S}[/green]")


@pages_app.command("list")
def list_pages(
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum pages to show"),
) -> None:
    """
    List pages marked as ingested, most recent first.

    Examples:
        hashlist-crawler crawl pages list --limit 10
    """
    init_db()
    with get_session() as session:
        repo = IngestedPageRepository(session)
        total = repo.count()
        pages = repo.list_all(limit=limit)

    if not pages:
        rprint("[yellow]No pages ingested yet[/yellow]")
        return

    table = Table(title=f"Ingested Pages ({total} total)")
    table.add_column("Page", style="bold")
    table.add_column("Ingested At")

    for page in pages:
        table.add_row(page.name, f"{page.ingested_at:%Y-%m-%d %H:%M:%S}")

    console.print(table)


def _display_run_stats(result: dict) -> None:
    """Display crawl statistics."""
    status = result.get("status", "unknown")
    status_color = {
        "completed": "green",
        "running": "blue",
        "failed": "red",
    }.get(status, "white")

    rprint(f"\n[bold]Results:[/bold]")
    rprint(f"  Status: [{status_color}]{status}[/{status_color}]")

    if result.get("duration_seconds"):
        rprint(f"  Duration: {result['duration_seconds']:.1f}s")

    rprint(f"\n[bold]Statistics:[/bold]")
    rprint(f"  Pages found: {result.get('pages_found', 0)}")
    rprint(f"  Pages skipped: {result.get('pages_skipped', 0)}")
    rprint(f"  Pages fetched: {result.get('pages_fetched', 0)}")
    rprint(f"  Pages ingested: {result.get('pages_ingested', 0)}")
    rprint(f"  Pages without payload: {result.get('pages_unextractable', 0)}")
    rprint(f"  Pages with empty payload: {result.get('pages_empty_payload', 0)}")
    rprint(f"  Pages without torrents: {result.get('pages_without_records', 0)}")
    rprint(f"  Rows decoded: {result.get('records_decoded', 0)}")
    rprint(f"  Torrents inserted: {result.get('torrents_inserted', 0)}")

    errors = result.get("errors", [])
    if errors:
        rprint(f"\n[bold red]Errors ({len(errors)}):[/bold red]")
        for error in errors[:10]:  # Show first 10
            rprint(f"  • {error}")
        if len(errors) > 10:
            rprint(f"  ... and {len(errors) - 10} more")
