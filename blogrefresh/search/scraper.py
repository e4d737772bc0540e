"""Competitor page scraping."""

import logging
from typing import List, Optional, Sequence

from ..config import ExtractionConfig
from ..errors import ExtractionEmpty, FetchFailure, NavigationError, NetworkError
from ..extraction import extract_competitor
from .models import ScrapedSource, SearchResult

logger = logging.getLogger(__name__)

SOURCE_SEPARATOR = "\n\n---\n\n"


async def scrape_result(
    session,
    result: SearchResult,
    config: Optional[ExtractionConfig] = None,
) -> ScrapedSource:
    """
    Fetch one search result in its own page and extract its main text.

    Raises:
        FetchFailure: The page could not be loaded
        ExtractionEmpty: Nothing long enough was found on the page
    """
    config = config or ExtractionConfig()
    logger.info("Scraping: %s", result.url)

    fetched = await session.fetch(result.url)
    if not fetched.success:
        error_cls = NavigationError if fetched.error_kind == "navigation" else NetworkError
        raise error_cls(result.url, fetched.error or "fetch failed")

    extraction = extract_competitor(fetched.document, min_length=config.min_content_chars)
    return ScrapedSource(
        url=result.url,
        title=result.title,
        content_excerpt=extraction.content[: config.source_excerpt_chars],
    )


async def scrape_results(
    session,
    results: Sequence[SearchResult],
    config: Optional[ExtractionConfig] = None,
) -> List[ScrapedSource]:
    """Scrape results one at a time, skipping the ones that fail."""
    sources = []
    for result in results:
        try:
            sources.append(await scrape_result(session, result, config))
        except FetchFailure as e:
            logger.warning("Skipping %s: %s", result.url, e.reason)
        except ExtractionEmpty as e:
            logger.warning("Skipping %s: %s", result.url, e)
    return sources


def join_sources(sources: Sequence[ScrapedSource]) -> str:
    """Joined competitor corpus handed to the rewriter."""
    return SOURCE_SEPARATOR.join(source.render() for source in sources)
