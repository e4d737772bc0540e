"""Document parsing and heuristic content extraction."""

from .document import Document
from .extractor import (
    NO_CONTENT_SENTINEL,
    Extraction,
    extract_catalog_article,
    extract_competitor,
    extract_title,
    extract_title_link,
)
from .strategies import (
    CATALOG_CONTENT_STRATEGIES,
    CATALOG_TITLE_STRATEGIES,
    COMPETITOR_CONTENT_STRATEGIES,
    Strategy,
    first_match,
)

__all__ = [
    "Document",
    "Extraction",
    "Strategy",
    "NO_CONTENT_SENTINEL",
    "CATALOG_CONTENT_STRATEGIES",
    "CATALOG_TITLE_STRATEGIES",
    "COMPETITOR_CONTENT_STRATEGIES",
    "extract_catalog_article",
    "extract_competitor",
    "extract_title",
    "extract_title_link",
    "first_match",
]
