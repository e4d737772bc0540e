"""Ingest command implementation."""

import asyncio

import typer
from rich.console import Console

from ..db import ArticleStore, Database, validate_connection
from ..fetching import StaticFetcher
from ..ingestion import CatalogIngester, print_ingest_summary
from .context import load_cli_config

console = Console()


def ingest_command(
    ctx: typer.Context,
    pages: int = typer.Option(
        1,
        "--pages",
        "-p",
        min=1,
        help="Number of listing pages to read, starting from the oldest",
    ),
) -> None:
    """Scrape the blog catalog and store its articles."""
    config = load_cli_config(ctx)
    catalog = config.config.catalog

    with Database(config.get_db_config()) as db:
        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(db):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)

        fetcher = StaticFetcher(timeout=catalog.timeout_seconds, user_agent=catalog.user_agent)
        ingester = CatalogIngester(fetcher, ArticleStore(db), catalog)

        try:
            stats = asyncio.run(ingester.ingest(pages))
        except KeyboardInterrupt:
            console.print("\n[yellow]Ingestion interrupted by user[/yellow]")
            raise typer.Exit(1)

    print_ingest_summary(stats)
    if stats.found and not stats.saved:
        raise typer.Exit(1)
