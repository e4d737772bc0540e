"""Plain HTTP fetcher for pages that need no script execution."""

import logging
from typing import Optional

import httpx

from ..config.models import DEFAULT_USER_AGENT
from ..errors import NetworkError
from ..extraction import Document
from .models import FetchResult

logger = logging.getLogger(__name__)


class StaticFetcher:
    """Fetch HTML over HTTP and parse it into a Document."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize static fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a single page. Failures are logged and returned, never raised."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                reason = "Page not found (404)"
            elif status == 403:
                reason = "Access forbidden (403)"
            elif status >= 500:
                reason = f"Server error ({status})"
            else:
                reason = f"HTTP {status}"
            return self._failure(url, reason)
        except httpx.TimeoutException:
            return self._failure(url, "Request timed out")
        except httpx.HTTPError as e:
            return self._failure(url, f"HTTP error: {e}")

        content_type = response.headers.get("content-type", "")
        if "html" not in content_type.lower():
            logger.warning("Skipping %s: not an HTML response (%s)", url, content_type or "no content type")
            return FetchResult.failed(url, NetworkError(url, f"Not HTML: {content_type}"), kind="not_html")

        return FetchResult.ok(url, Document(response.text, url=str(response.url)))

    def _failure(self, url: str, reason: str) -> FetchResult:
        logger.warning("Failed to fetch %s: %s", url, reason)
        return FetchResult.failed(url, NetworkError(url, reason))
