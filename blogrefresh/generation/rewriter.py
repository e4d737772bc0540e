"""Article rewriting from competitor content."""

import asyncio
import logging
from typing import Optional

from ..config import ExtractionConfig
from ..errors import RewriteFailure, RewriteTimeout
from .llm_provider import LLMProvider

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "\n\n(No external sources found to update this article)"
FAILURE_SENTINEL = "Failed to update content via AI."
EMPTY_COMPLETION_SENTINEL = "Failed to generate content"


def build_rewrite_prompt(
    title: str,
    original_content: str,
    competitor_text: str,
    config: Optional[ExtractionConfig] = None,
) -> str:
    """Single prompt embedding the truncated original and the competitor corpus."""
    config = config or ExtractionConfig()
    original_excerpt = original_content[: config.original_prompt_chars]
    corpus = competitor_text[: config.corpus_prompt_chars]

    return f"""You are an expert content writer.

Original Article Title: "{title}"
Original Content (truncated): "{original_excerpt}..."

Top Ranking Competitor Content:
{corpus}

Task:
- Rewrite the original article so it is better and more comprehensive.
- Match the formatting and structure of the competitor content.
- Keep the tone professional and engaging.
- Cite the sources at the bottom as a list of links.

Return ONLY the markdown content of the new article."""


class Rewriter:
    """Produce the refreshed article body."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        config: Optional[ExtractionConfig] = None,
        timeout_seconds: float = 120.0,
    ) -> None:
        """
        Initialize rewriter.

        Args:
            llm_provider: Completion service
            config: Prompt truncation limits
            timeout_seconds: Upper bound on the completion call
        """
        self.llm_provider = llm_provider
        self.config = config or ExtractionConfig()
        self.timeout_seconds = timeout_seconds

    async def rewrite(self, title: str, original_content: str, competitor_text: str) -> str:
        """
        Rewrite an article.

        Never raises for service problems: an empty corpus returns the
        original content with a notice, a failed call returns a sentinel.
        """
        if not competitor_text:
            logger.info("No competitor content for %r; keeping original content", title)
            return original_content + FALLBACK_NOTICE

        prompt = build_rewrite_prompt(title, original_content, competitor_text, self.config)
        logger.info("Requesting rewrite for %r (%d prompt chars)", title, len(prompt))

        try:
            content = await asyncio.wait_for(
                asyncio.to_thread(self.llm_provider.complete, prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error("Rewrite for %r timed out after %.0fs", title, self.timeout_seconds)
            return FAILURE_SENTINEL
        except RewriteTimeout as e:
            logger.error("Rewrite for %r timed out: %s", title, e)
            return FAILURE_SENTINEL
        except RewriteFailure as e:
            logger.error("Rewrite for %r failed: %s", title, e)
            return FAILURE_SENTINEL
        except Exception:
            logger.exception("Unexpected error from LLM provider while rewriting %r", title)
            return FAILURE_SENTINEL

        return content or EMPTY_COMPLETION_SENTINEL
