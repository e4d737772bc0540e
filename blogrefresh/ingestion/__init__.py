"""Catalog ingestion of the articles to refresh."""

from .catalog import (
    CatalogEntry,
    CatalogIngester,
    IngestStats,
    find_last_page,
    page_url,
    parse_catalog_page,
    print_ingest_summary,
)

__all__ = [
    "CatalogEntry",
    "CatalogIngester",
    "IngestStats",
    "find_last_page",
    "page_url",
    "parse_catalog_page",
    "print_ingest_summary",
]
