"""
Tests for catalog ingestion and the static fetcher.

HTTP is served by an httpx.MockTransport, so no network is used.
"""
import asyncio

import httpx

from blogrefresh.config import CatalogConfig
from blogrefresh.extraction import Document
from blogrefresh.fetching import StaticFetcher
from blogrefresh.ingestion import CatalogIngester, find_last_page, page_url, parse_catalog_page

from tests.fixtures.doubles import InMemoryArticleStore
from tests.fixtures.html_pages import (
    CATALOG_ARTICLE_PAGE,
    CATALOG_EMPTY_PAGE,
    CATALOG_HEADINGS_ONLY_PAGE,
    CATALOG_LISTING_PAGE,
)

BASE_URL = "https://example.com/blogs/"


def _fetcher(routes):
    """StaticFetcher answering from a {url: html} map, 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = routes.get(str(request.url))
        if body is None:
            return httpx.Response(404, html="<h1>Not found</h1>")
        return httpx.Response(200, html=body)

    return StaticFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


class TestCatalogParsing:
    """Tests for listing page parsing."""

    def test_last_page(self):
        assert find_last_page(Document(CATALOG_LISTING_PAGE)) == 14
        assert find_last_page(Document(CATALOG_ARTICLE_PAGE)) == 1

    def test_page_url(self):
        assert page_url(BASE_URL, 1) == BASE_URL
        assert page_url(BASE_URL, 14) == "https://example.com/blogs/page/14/"

    def test_article_items(self):
        entries = parse_catalog_page(Document(CATALOG_LISTING_PAGE, url=BASE_URL))
        assert [(e.title, e.url) for e in entries] == [
            ("Choosing a Chatbot", "https://example.com/blogs/choosing-a-chatbot/"),
            ("Live Chat vs Bots", "https://example.com/blogs/live-chat-vs-bots/"),
        ]
        assert entries[0].snippet == "Start with the questions your customers ask most."
        assert entries[1].snippet == ""

    def test_heading_fallback(self):
        entries = parse_catalog_page(Document(CATALOG_HEADINGS_ONLY_PAGE, url=BASE_URL))
        assert [e.url for e in entries] == [
            "https://example.com/blogs/first-post/",
            "https://example.com/blogs/second-post/",
        ]


class TestCatalogIngester:
    """Tests for discovery and storage."""

    def test_ingest_oldest_page(self):
        fetcher = _fetcher(
            {
                BASE_URL: CATALOG_LISTING_PAGE,
                "https://example.com/blogs/page/14/": CATALOG_LISTING_PAGE,
                "https://example.com/blogs/choosing-a-chatbot/": CATALOG_ARTICLE_PAGE,
            }
        )
        store = InMemoryArticleStore()
        ingester = CatalogIngester(fetcher, store, CatalogConfig(base_url=BASE_URL))

        stats = asyncio.run(ingester.ingest(pages=1))

        assert (stats.found, stats.saved, stats.new, stats.failed) == (2, 1, 1, 1)
        row = store.rows[1]
        assert row["original_title"] == "Choosing a Chatbot"
        assert row["original_content"].startswith("Start with the questions")
        assert row["is_processed"] is False

        again = asyncio.run(ingester.ingest(pages=1))
        assert (again.new, again.updated) == (0, 1)
        assert len(store.rows) == 1

    def test_snippet_used_when_page_has_no_content(self):
        fetcher = _fetcher(
            {
                BASE_URL: CATALOG_LISTING_PAGE,
                "https://example.com/blogs/page/14/": CATALOG_LISTING_PAGE,
                "https://example.com/blogs/choosing-a-chatbot/": CATALOG_EMPTY_PAGE,
            }
        )
        store = InMemoryArticleStore()
        asyncio.run(CatalogIngester(fetcher, store, CatalogConfig(base_url=BASE_URL)).ingest())

        assert store.rows[1]["original_content"] == "Start with the questions your customers ask most."

    def test_unreachable_catalog(self):
        store = InMemoryArticleStore()
        stats = asyncio.run(CatalogIngester(_fetcher({}), store, CatalogConfig(base_url=BASE_URL)).ingest())
        assert stats.found == 0
        assert store.rows == {}


class TestStaticFetcher:
    """Tests for HTTP failure envelopes."""

    def test_not_found(self):
        result = asyncio.run(_fetcher({}).fetch("https://example.com/missing"))
        assert not result.success
        assert result.error == "Page not found (404)"
        assert result.error_kind == "network"

    def test_non_html_rejected(self):
        def handler(request):
            return httpx.Response(200, json={"ok": True})

        fetcher = StaticFetcher(transport=httpx.MockTransport(handler))
        result = asyncio.run(fetcher.fetch("https://example.com/api"))
        assert result.error_kind == "not_html"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = StaticFetcher(transport=httpx.MockTransport(handler))
        result = asyncio.run(fetcher.fetch("https://example.com/slow"))
        assert result.error == "Request timed out"

    def test_success_records_final_url(self):
        result = asyncio.run(_fetcher({BASE_URL: CATALOG_ARTICLE_PAGE}).fetch(BASE_URL))
        assert result.success
        assert result.document.url == BASE_URL
        assert result.document.title == "Choosing a Chatbot | Blog"
