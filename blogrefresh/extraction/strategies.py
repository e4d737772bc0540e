"""
Extraction strategies.

Each strategy is a named pure function ``(Document) -> Optional[str]``.
Chains are plain tuples evaluated in order by :func:`first_match`, so the
policy stays data-driven: reordering or extending a chain never touches
the evaluation code, and the same document always selects the same
strategy.
"""

from typing import Callable, NamedTuple, Optional, Sequence, Tuple

import trafilatura

from .document import Document


class Strategy(NamedTuple):
    """One extraction heuristic."""

    name: str
    apply: Callable[[Document], Optional[str]]


def first_text(selector: str) -> Strategy:
    """Text of the first element matching ``selector``."""

    def apply(doc: Document) -> Optional[str]:
        return doc.text_of(selector) or None

    return Strategy(selector, apply)


def all_text(selector: str) -> Strategy:
    """Text of every element matching ``selector``, joined."""

    def apply(doc: Document) -> Optional[str]:
        return doc.texts_of(selector) or None

    return Strategy(f"{selector} (all)", apply)


def _main_text(doc: Document) -> Optional[str]:
    if not doc.html:
        return None
    return trafilatura.extract(
        doc.html,
        include_comments=False,
        include_tables=False,
        favor_precision=True,
        url=doc.url or None,
    )


def _paragraphs(doc: Document) -> Optional[str]:
    return doc.texts_of("p", separator="\n\n") or None


main_text = Strategy("trafilatura", _main_text)
paragraphs = Strategy("paragraphs", _paragraphs)


# Title of a catalog listing item or article page
CATALOG_TITLE_STRATEGIES: Tuple[Strategy, ...] = (
    first_text("h2 a"),
    first_text("h3 a"),
    first_text(".entry-title a"),
    first_text(".entry-title"),
    first_text("h1"),
)

# Anchors that carry an article's title and link on a listing page
CATALOG_LINK_SELECTORS: Tuple[str, ...] = ("h2 a", "h3 a", ".entry-title a")

# Body of one of our own blog posts
CATALOG_CONTENT_STRATEGIES: Tuple[Strategy, ...] = (
    all_text(".entry-content"),
    all_text(".post-content"),
    all_text("article .content"),
    main_text,
    paragraphs,
)

# Main text of an arbitrary competitor page
COMPETITOR_CONTENT_STRATEGIES: Tuple[Strategy, ...] = (
    first_text("article"),
    first_text("main"),
    first_text(".content"),
    first_text(".post-content"),
    first_text("#content"),
    first_text("body"),
)


def first_match(
    doc: Document,
    strategies: Sequence[Strategy],
    min_length: int = 0,
) -> Optional[Tuple[str, str]]:
    """
    Evaluate strategies in order.

    Args:
        doc: Document to extract from
        strategies: Ordered chain
        min_length: A result is accepted only when its stripped length
            is greater than this

    Returns:
        Tuple of (strategy name, text) for the first accepted result
    """
    for strategy in strategies:
        text = strategy.apply(doc)
        if text is None:
            continue
        text = text.strip()
        if text and len(text) > min_length:
            return strategy.name, text
    return None
