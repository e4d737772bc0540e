"""CLI package for blogrefresh."""

from .app import app

__all__ = ["app"]
