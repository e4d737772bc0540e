"""Search engine lookup and competitor scraping."""

from .models import ScrapedSource, SearchResult
from .scraper import SOURCE_SEPARATOR, join_sources, scrape_result, scrape_results
from .searcher import Searcher, filter_result_links, is_blocked, unwrap_redirect

__all__ = [
    "Searcher",
    "SearchResult",
    "ScrapedSource",
    "SOURCE_SEPARATOR",
    "filter_result_links",
    "is_blocked",
    "join_sources",
    "scrape_result",
    "scrape_results",
    "unwrap_redirect",
]
