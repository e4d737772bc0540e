"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .articles import articles_app
from .context import CLIState
from .ingest import ingest_command
from .init import init_command
from .refresh import refresh_command

app = typer.Typer(
    name="blogrefresh",
    help="Blog Refresh - rewrite blog articles from top-ranking web content",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $BLOGREFRESH_CONFIG or ~/.config/blogrefresh/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Refresh blog articles with web research and an LLM rewrite."""
    ctx.obj = CLIState(config_path=config_path, verbose=verbose)


# Register commands
app.command("init")(init_command)
app.command("ingest")(ingest_command)
app.command("refresh")(refresh_command)
app.add_typer(articles_app, name="articles", help="Inspect stored articles")


if __name__ == "__main__":
    app()
