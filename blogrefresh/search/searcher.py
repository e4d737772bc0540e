"""Web search through the browser session."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import parse_qs, quote_plus, urlparse

from ..config import SearchConfig
from ..errors import FetchFailure
from .models import SearchResult

logger = logging.getLogger(__name__)

# Query parameter carrying the real target of a search engine redirect link
REDIRECT_PARAMS = ("uddg", "u", "url", "q")


def unwrap_redirect(href: str) -> str:
    """Resolve ``https://engine/l/?uddg=<target>`` style links to their target."""
    parsed = urlparse(href)
    if parsed.path.rstrip("/") not in ("/l", "/url"):
        return href
    query = parse_qs(parsed.query)
    for param in REDIRECT_PARAMS:
        values = query.get(param)
        if values and values[0].startswith(("http://", "https://")):
            return values[0]
    return href


def is_blocked(url: str, blocked_domains: Iterable[str]) -> bool:
    """Whether the URL's host is a blocked domain or one of its subdomains."""
    host = (urlparse(url).hostname or "").lower()
    for domain in blocked_domains:
        domain = domain.lower().lstrip(".")
        if host == domain or host.endswith("." + domain):
            return True
    return False


def filter_result_links(
    raw_links: Sequence[Dict[str, str]],
    blocked_domains: Iterable[str],
    max_results: int = 2,
) -> List[SearchResult]:
    """
    Turn raw ``{title, href}`` pairs into at most ``max_results`` results.

    Page order is preserved. Redirect links are unwrapped first, then
    non-web URLs, blocked domains and repeats are dropped.
    """
    blocked = list(blocked_domains)
    results: List[SearchResult] = []
    seen = set()

    for link in raw_links:
        if len(results) >= max_results:
            break

        href = (link.get("href") or "").strip()
        if not href:
            continue
        url = unwrap_redirect(href)

        if urlparse(url).scheme not in ("http", "https"):
            continue
        if is_blocked(url, blocked):
            continue
        if url in seen:
            continue

        seen.add(url)
        title = (link.get("title") or "").strip() or url
        results.append(SearchResult(title=title, url=url))

    return results


class Searcher:
    """Find competing pages for an article title."""

    def __init__(self, session, config: Optional[SearchConfig] = None) -> None:
        """
        Initialize searcher.

        Args:
            session: Open BrowserSession (anything with ``collect_links``)
            config: Search engine settings
        """
        self.session = session
        self.config = config or SearchConfig()

    def build_url(self, query: str) -> str:
        """Results page URL for a query."""
        return self.config.search_url.replace("{query}", quote_plus(query))

    async def search(self, query: str) -> List[SearchResult]:
        """
        Search for ``query``.

        Returns:
            Up to ``max_results`` results; empty when the page fails to load
            or nothing eligible is found
        """
        if not query.strip():
            return []

        url = self.build_url(query)
        logger.info("Searching web for: %s", query)

        try:
            raw_links = await self.session.collect_links(url, self.config.result_selector)
        except FetchFailure as e:
            logger.warning("Search failed for %r: %s", query, e.reason)
            return []

        results = filter_result_links(
            raw_links,
            self.config.blocked_domains,
            self.config.max_results,
        )
        logger.info(
            "Found %d result(s) for %r: %s",
            len(results),
            query,
            ", ".join(r.url for r in results) or "-",
        )
        return results
