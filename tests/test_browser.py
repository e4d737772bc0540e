"""
Tests for BrowserSession page handling.

A stub browser stands in for Chromium so page lifetime and navigation
error mapping can be checked without launching anything.
"""
import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from blogrefresh.config import BrowserConfig
from blogrefresh.errors import NavigationError, NetworkError
from blogrefresh.fetching import BrowserSession

from tests.fixtures.html_pages import COMPETITOR_ARTICLE_PAGE


class StubResponse:
    def __init__(self, status):
        self.status = status


class StubPage:
    """Page whose ``goto`` raises ``outcome`` or answers with that status."""

    def __init__(self, outcome, html=COMPETITOR_ARTICLE_PAGE, links=None):
        self.outcome = outcome
        self.html = html
        self.links = links
        self.url = "about:blank"
        self.goto_calls = []
        self.closed = 0

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        self.url = url
        return StubResponse(self.outcome)

    async def content(self):
        return self.html

    async def eval_on_selector_all(self, selector, script):
        if isinstance(self.links, Exception):
            raise self.links
        return self.links or []

    async def close(self):
        self.closed += 1


class StubBrowser:
    def __init__(self, pages):
        self.pages = list(pages)
        self.opened = []
        self.user_agents = []
        self.closed = 0

    async def new_page(self, user_agent=None):
        self.user_agents.append(user_agent)
        page = self.pages.pop(0)
        self.opened.append(page)
        return page

    async def close(self):
        self.closed += 1


class StubPlaywright:
    def __init__(self):
        self.stopped = 0

    async def stop(self):
        self.stopped += 1


def _session(*pages, config=None):
    session = BrowserSession(config or BrowserConfig(navigation_timeout_ms=5000, user_agent="TestAgent/1.0"))
    session._browser = StubBrowser(pages)
    session._playwright = StubPlaywright()
    return session


class TestFetch:
    """Every navigation gets its own page, closed on every path."""

    def test_success(self):
        page = StubPage(200)
        session = _session(page)

        result = asyncio.run(session.fetch("https://a.test/post"))

        assert result.success
        assert result.document.url == "https://a.test/post"
        assert result.document.title == "Why Chatbots Matter"
        assert page.goto_calls == [("https://a.test/post", "domcontentloaded", 5000)]
        assert session._browser.user_agents == ["TestAgent/1.0"]
        assert page.closed == 1

    def test_navigation_timeout(self):
        page = StubPage(PlaywrightTimeoutError("Timeout 5000ms exceeded"))
        session = _session(page)

        result = asyncio.run(session.fetch("https://slow.test/"))

        assert not result.success
        assert result.error_kind == "navigation"
        assert result.error == "Navigation timed out after 5000 ms"
        assert page.closed == 1

    def test_rejected_navigation(self):
        page = StubPage(PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://nowhere.test/"))
        session = _session(page)

        result = asyncio.run(session.fetch("https://nowhere.test/"))

        assert result.error_kind == "navigation"
        assert "ERR_NAME_NOT_RESOLVED" in result.error
        assert page.closed == 1

    def test_error_status(self):
        page = StubPage(500)
        session = _session(page)

        result = asyncio.run(session.fetch("https://broken.test/"))

        assert not result.success
        assert result.error_kind == "network"
        assert result.error == "HTTP 500"
        assert page.closed == 1

    def test_pages_not_shared(self):
        first, second = StubPage(500), StubPage(200)
        session = _session(first, second)

        asyncio.run(session.fetch("https://broken.test/"))
        result = asyncio.run(session.fetch("https://a.test/"))

        assert result.success
        assert session._browser.opened == [first, second]
        assert (first.closed, second.closed) == (1, 1)


class TestCollectLinks:
    """In-page evaluation of result anchors."""

    def test_returns_links(self):
        links = [{"title": "A", "href": "https://a.test/"}]
        page = StubPage(200, links=links)
        session = _session(page)

        assert asyncio.run(session.collect_links("https://search.test/?q=x", ".result__a")) == links
        assert page.closed == 1

    def test_error_status_raises_network_error(self):
        page = StubPage(403)
        session = _session(page)

        with pytest.raises(NetworkError):
            asyncio.run(session.collect_links("https://search.test/?q=x", ".result__a"))
        assert page.closed == 1

    def test_evaluation_failure_raises_navigation_error(self):
        page = StubPage(200, links=PlaywrightError("Execution context was destroyed"))
        session = _session(page)

        with pytest.raises(NavigationError):
            asyncio.run(session.collect_links("https://search.test/?q=x", ".result__a"))
        assert page.closed == 1


class TestSessionLifetime:
    """The browser is closed exactly once."""

    def test_close_is_idempotent(self):
        session = _session()
        browser, playwright = session._browser, session._playwright

        asyncio.run(session.close())
        asyncio.run(session.close())

        assert browser.closed == 1
        assert playwright.stopped == 1

    def test_open_page_requires_started_session(self):
        session = BrowserSession()

        async def open_one():
            async with session.open_page():
                pass

        with pytest.raises(RuntimeError):
            asyncio.run(open_one())
