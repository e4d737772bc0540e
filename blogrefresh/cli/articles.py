"""Article inspection commands."""

from typing import Optional

import pendulum
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..db import ArticleStore, Database
from ..errors import PersistenceFailure
from ..models import Article
from .context import load_cli_config

console = Console()
articles_app = typer.Typer(help="Inspect stored articles")


def _status(article: Article) -> str:
    if article.is_processed:
        return "[green]rewritten[/green]" if article.has_rewrite else "[yellow]no sources[/yellow]"
    if article.claim_token:
        return "[magenta]in flight[/magenta]"
    return "[dim]pending[/dim]"


def _when(article: Article) -> str:
    if article.updated_at is None:
        return "-"
    # TIMESTAMP columns carry no zone; read them in this machine's zone
    return pendulum.instance(article.updated_at, tz=pendulum.local_timezone()).diff_for_humans()


@articles_app.command("list")
def articles_list(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Maximum rows to show"),
    processed: Optional[bool] = typer.Option(
        None,
        "--processed/--unprocessed",
        help="Only show processed (or unprocessed) articles",
    ),
) -> None:
    """List articles, newest first."""
    config = load_cli_config(ctx)

    with Database(config.get_db_config()) as db:
        store = ArticleStore(db)
        try:
            articles = store.list_articles(limit=limit, only_processed=processed)
            counts = store.count_articles()
        except PersistenceFailure as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    if not articles:
        console.print("[yellow]No articles stored. Run 'blogrefresh ingest' first.[/yellow]")
        return

    table = Table(title="Articles")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Links", justify="right")
    table.add_column("Updated", style="yellow")

    for article in articles:
        table.add_row(
            str(article.id),
            article.original_title[:70],
            _status(article),
            str(len(article.reference_links or [])),
            _when(article),
        )

    console.print(table)
    console.print(
        f"[dim]{counts['total']} total, {counts['processed']} processed "
        f"({counts['rewritten']} rewritten), {counts['in_flight']} in flight[/dim]"
    )


@articles_app.command("show")
def articles_show(
    ctx: typer.Context,
    article_id: int = typer.Argument(..., help="Article ID"),
    original: bool = typer.Option(False, "--original", help="Show the original body instead of the rewrite"),
) -> None:
    """Show one article with its rewrite and reference links."""
    config = load_cli_config(ctx)

    with Database(config.get_db_config()) as db:
        try:
            article = ArticleStore(db).get_article(article_id)
        except PersistenceFailure as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    if article is None:
        console.print(f"[red]Article {article_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]{article.original_title}[/bold]  {_status(article)}")
    console.print(f"[blue]{article.url}[/blue]")

    if original or not article.has_rewrite:
        body, title = article.original_content, "Original content"
    else:
        body, title = article.updated_content, "Updated content"
    console.print(Panel(Markdown(body), title=title))

    if article.reference_links:
        console.print("\n[bold]Reference links:[/bold]")
        for link in article.reference_links:
            console.print(f"  • {link}")
