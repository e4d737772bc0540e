"""Title and content extraction built on the strategy chains."""

import logging
from typing import Optional, Tuple

from pydantic import BaseModel, Field

from ..errors import ExtractionEmpty
from .document import Document, element_text
from .strategies import (
    CATALOG_CONTENT_STRATEGIES,
    CATALOG_LINK_SELECTORS,
    CATALOG_TITLE_STRATEGIES,
    COMPETITOR_CONTENT_STRATEGIES,
    first_match,
)

logger = logging.getLogger(__name__)

NO_CONTENT_SENTINEL = "No content found"


class Extraction(BaseModel):
    """Result of running the extraction chains on a document."""

    title: Optional[str] = Field(None, description="Extracted title, if requested")
    content: str = Field(..., description="Extracted main text")
    strategy: Optional[str] = Field(None, description="Name of the content strategy that matched")


def extract_title(doc: Document) -> Optional[str]:
    """First non-empty title heuristic."""
    match = first_match(doc, CATALOG_TITLE_STRATEGIES)
    return match[1] if match else None


def extract_title_link(doc: Document) -> Optional[Tuple[str, str]]:
    """
    Title and href of the first heading anchor.

    Returns:
        Tuple of (title, href), or None when no anchor has both
    """
    for selector in CATALOG_LINK_SELECTORS:
        anchor = doc.select_one(selector)
        if anchor is None:
            continue
        title = element_text(anchor)
        href = (anchor.get("href") or "").strip()
        if title and href:
            return title, href
    return None


def extract_catalog_article(doc: Document) -> Extraction:
    """
    Extract one of our own posts.

    Never fails: when no heuristic finds text the content is the
    ``No content found`` sentinel.
    """
    title = extract_title(doc) or doc.title or None
    match = first_match(doc, CATALOG_CONTENT_STRATEGIES)
    if match is None:
        logger.debug("No catalog content strategy matched %s", doc.url)
        return Extraction(title=title, content=NO_CONTENT_SENTINEL)

    strategy, content = match
    return Extraction(title=title, content=content, strategy=strategy)


def extract_competitor(doc: Document, min_length: int = 500) -> Extraction:
    """
    Extract the main text of a competitor page.

    Raises:
        ExtractionEmpty: No candidate container is longer than ``min_length``
    """
    match = first_match(doc, COMPETITOR_CONTENT_STRATEGIES, min_length=min_length)
    if match is None:
        raise ExtractionEmpty(doc.url, min_length)

    strategy, content = match
    logger.debug("Extracted %d chars from %s via %s", len(content), doc.url, strategy)
    return Extraction(title=doc.title or None, content=content, strategy=strategy)
