"""Logging setup."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LOGGING_CONFIGURED = False


def configure_logging(level: str = "INFO", console: Optional[Console] = None) -> None:
    """
    Route the root logger through a Rich handler.

    Safe to call more than once; later calls only adjust the level.
    """
    global _LOGGING_CONFIGURED

    root = logging.getLogger()
    root.setLevel(level.upper())

    if _LOGGING_CONFIGURED:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))

    root.handlers.clear()
    root.addHandler(handler)

    # Third-party chatter
    for noisy in ("httpx", "httpcore", "openai", "trafilatura"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
