"""Refresh command implementation."""

import asyncio
from typing import Optional

import typer
from playwright.async_api import Error as PlaywrightError
from rich.console import Console

from ..db import ArticleStore, Database, validate_connection
from ..errors import RefreshError
from ..generation import Rewriter, create_llm_provider
from ..pipeline import OutcomeStatus, PipelineOrchestrator, print_refresh_summary
from .context import load_cli_config

console = Console()


def refresh_command(
    ctx: typer.Context,
    batch: Optional[int] = typer.Option(
        None,
        "--batch",
        "-b",
        min=1,
        help="Maximum articles to refresh in this run (default: pipeline.batch_size)",
    ),
) -> None:
    """Refresh the oldest unprocessed articles."""
    config = load_cli_config(ctx)
    settings = config.config

    with Database(config.get_db_config()) as db:
        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(db):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)

        timeout = settings.pipeline.rewrite_timeout_seconds
        provider = create_llm_provider(config.get_llm_config(), timeout=timeout)
        rewriter = Rewriter(provider, settings.extraction, timeout_seconds=timeout)
        orchestrator = PipelineOrchestrator(ArticleStore(db), rewriter, settings)

        try:
            outcomes = asyncio.run(orchestrator.run(batch))
        except KeyboardInterrupt:
            console.print("\n[yellow]Refresh interrupted by user[/yellow]")
            raise typer.Exit(1)
        except RefreshError as e:
            console.print(f"[red]Refresh failed: {e}[/red]")
            raise typer.Exit(1)
        except PlaywrightError as e:
            console.print(f"[red]Browser failed: {e}[/red]")
            console.print("Install it with: [bold]playwright install chromium[/bold]")
            raise typer.Exit(1)

    print_refresh_summary(outcomes)

    usage = provider.get_usage_stats()
    if usage["api_calls"]:
        console.print(
            f"[dim]LLM: {usage['api_calls']} calls, {usage['total_tokens']} tokens, "
            f"est. ${usage['estimated_cost']:.4f} ({usage['model']})[/dim]"
        )

    if any(outcome.status == OutcomeStatus.FAILED for outcome in outcomes):
        raise typer.Exit(1)
