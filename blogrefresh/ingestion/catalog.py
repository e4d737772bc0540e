"""Blog catalog ingestion: discover our own posts and store them."""

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin

from pydantic import BaseModel, Field
from rich.console import Console

from ..config import CatalogConfig
from ..db import ArticleStore
from ..errors import PersistenceFailure
from ..extraction import NO_CONTENT_SENTINEL, Document, extract_catalog_article, extract_title_link
from ..fetching import StaticFetcher

logger = logging.getLogger(__name__)
console = Console()

PAGE_NUMBER_PATTERN = re.compile(r"/page/(\d+)/")


class CatalogEntry(BaseModel):
    """Article discovered on a listing page."""

    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Absolute article URL")
    snippet: str = Field("", description="Excerpt shown on the listing page")


class IngestStats(BaseModel):
    """Statistics for an ingestion run."""

    pages: int = Field(0, description="Listing pages read")
    found: int = Field(0, description="Articles discovered")
    saved: int = Field(0, description="Articles stored")
    new: int = Field(0, description="Articles inserted")
    updated: int = Field(0, description="Existing URLs refreshed")
    failed: int = Field(0, description="Articles that could not be fetched or stored")


def find_last_page(doc: Document) -> int:
    """Highest page number linked from a listing page (1 when unpaginated)."""
    last_page = 1
    for anchor in doc.select('a[href*="/page/"]'):
        match = PAGE_NUMBER_PATTERN.search(anchor.get("href") or "")
        if match:
            last_page = max(last_page, int(match.group(1)))
    return last_page


def page_url(base_url: str, page: int) -> str:
    """URL of listing page ``page``."""
    if page <= 1:
        return base_url
    return f"{base_url}page/{page}/"


def parse_catalog_page(doc: Document) -> List[CatalogEntry]:
    """Articles listed on one catalog page, in page order."""
    entries: List[CatalogEntry] = []

    items = doc.select("article") or doc.select(".post")
    for item in items:
        scoped = doc.scope(item)
        link = extract_title_link(scoped)
        if link is None:
            continue
        title, href = link
        entries.append(
            CatalogEntry(
                title=title,
                url=urljoin(doc.url, href),
                snippet=scoped.texts_of(".entry-content, .post-excerpt", separator=" "),
            )
        )

    if not entries:
        logger.debug("No article items on %s; falling back to heading links", doc.url)
        for anchor in doc.select("h2 a"):
            href = (anchor.get("href") or "").strip()
            title = anchor.get_text(strip=True)
            if href and title and "/blogs/" in href and "/page/" not in href:
                entries.append(CatalogEntry(title=title, url=urljoin(doc.url, href)))

    unique = []
    seen = set()
    for entry in entries:
        if entry.url not in seen:
            seen.add(entry.url)
            unique.append(entry)
    return unique


class CatalogIngester:
    """Populate the article table from the blog's listing pages."""

    def __init__(
        self,
        fetcher: StaticFetcher,
        store: ArticleStore,
        config: Optional[CatalogConfig] = None,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.config = config or CatalogConfig()

    async def detect_last_page(self) -> int:
        """Page number of the oldest listing page."""
        result = await self.fetcher.fetch(self.config.base_url)
        if not result.success:
            return 1
        last_page = find_last_page(result.document)
        logger.info("Detected last page: %d", last_page)
        return last_page

    async def discover(self, pages: int = 1) -> List[CatalogEntry]:
        """
        Articles from the last ``pages`` listing pages, oldest page first.
        """
        last_page = await self.detect_last_page()
        first_page = max(1, last_page - pages + 1)

        entries: List[CatalogEntry] = []
        for page in range(last_page, first_page - 1, -1):
            url = page_url(self.config.base_url, page)
            logger.info("Fetching articles from: %s", url)
            result = await self.fetcher.fetch(url)
            if not result.success:
                logger.error("Failed to load listing page %s", url)
                continue
            page_entries = parse_catalog_page(result.document)
            logger.info("Found %d articles on %s", len(page_entries), url)
            entries.extend(page_entries)

        return entries

    async def ingest(self, pages: int = 1) -> IngestStats:
        """Discover articles, fetch each one and upsert it by URL."""
        entries = await self.discover(pages)
        stats = IngestStats(pages=pages, found=len(entries))

        for entry in entries:
            logger.info("Scraping content for: %s", entry.title)
            result = await self.fetcher.fetch(entry.url)
            if not result.success:
                stats.failed += 1
                continue

            content = extract_catalog_article(result.document).content
            if content == NO_CONTENT_SENTINEL and entry.snippet:
                content = entry.snippet

            try:
                _, is_new = self.store.upsert_by_url(
                    original_title=entry.title,
                    original_content=content,
                    url=entry.url,
                )
            except PersistenceFailure as e:
                logger.error("Failed to save %s: %s", entry.title, e)
                stats.failed += 1
                continue

            stats.saved += 1
            if is_new:
                stats.new += 1
            else:
                stats.updated += 1
            logger.info("Saved: %s", entry.title)

        return stats


def print_ingest_summary(stats: IngestStats) -> None:
    """Print summary of catalog ingestion."""
    console.print("\n[bold]Catalog Ingestion Summary:[/bold]")
    console.print(f"  Listing pages: {stats.pages}")
    console.print(f"  Articles found: {stats.found}")
    console.print(f"  Saved: [green]{stats.saved}[/green] ({stats.new} new, {stats.updated} updated)")
    console.print(f"  Failed: [red]{stats.failed}[/red]")
