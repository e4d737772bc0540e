"""Static and browser-driven page fetching."""

from .browser import BrowserSession
from .models import FetchResult
from .static_fetcher import StaticFetcher

__all__ = ["BrowserSession", "FetchResult", "StaticFetcher"]
