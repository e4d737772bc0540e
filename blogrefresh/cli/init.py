"""Init command implementation."""

from pathlib import Path
from typing import Optional

import psycopg
import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, default_config_path, save_config
from ..db import Database, init_database, validate_connection
from ..log import configure_logging
from .context import CLIState

console = Console()


def init_command(
    ctx: typer.Context,
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("blogrefresh", "--db-name", help="Database name"),
    db_user: str = typer.Option("blogrefresh", "--db-user", help="Database user"),
    catalog_url: Optional[str] = typer.Option(None, "--catalog-url", help="Blog listing URL to ingest from"),
    setup_db: bool = typer.Option(
        True,
        "--db/--no-db",
        help="Validate the database connection and create the schema",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Initialize configuration and database schema."""
    configure_logging("INFO")
    console.print(Panel.fit("Blog Refresh - Initialization", style="bold blue"))

    state: CLIState = ctx.obj or CLIState()
    config_path: Path = state.config_path or default_config_path()

    if config_path.exists() and not force:
        console.print(f"Using existing config: {config_path} (pass --force to overwrite)")
        config = Config(config_path)
    else:
        model = ConfigModel(
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
                "password_env": "BLOGREFRESH_DB_PASSWORD",
            },
        )
        if catalog_url:
            model.catalog.base_url = catalog_url if catalog_url.endswith("/") else catalog_url + "/"
        save_config(model, config_path)
        console.print(f"✅ Created config: {config_path}")
        config = Config.from_model(model)

    if not setup_db:
        console.print("[dim]Skipping database setup.[/dim]")
        return

    console.print("\n[bold]Testing database connection...[/bold]")
    with Database(config.get_db_config()) as db:
        if not validate_connection(db):
            console.print(
                "[red]❌ Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: "
                "[bold]export BLOGREFRESH_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)
        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(db)
        except psycopg.DatabaseError as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
        console.print("✅ Database schema initialized")

    console.print(
        Panel(
            f"[green]✅ Blog Refresh initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set LLM API key: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"2. Install the browser: [bold]playwright install chromium[/bold]\n"
            f"3. Ingest articles: [bold]blogrefresh ingest[/bold]\n"
            f"4. Refresh: [bold]blogrefresh refresh[/bold]",
            style="green",
        )
    )
