"""Shared CLI state: config location and logging."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..log import configure_logging

console = Console()


class CLIState:
    """Options given before the command name."""

    def __init__(self, config_path: Optional[Path] = None, verbose: bool = False) -> None:
        self.config_path = config_path
        self.verbose = verbose


def load_cli_config(ctx: typer.Context) -> Config:
    """Load configuration and set up logging, exiting on config errors."""
    state: CLIState = ctx.obj or CLIState()
    config = Config(state.config_path)

    try:
        model = config.config
    except FileNotFoundError:
        console.print(
            f"[red]Config file not found: {config.config_path}[/red]\n"
            "Run 'blogrefresh init' first."
        )
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    configure_logging("DEBUG" if state.verbose else model.logging.level)
    return config
