"""Parsed document handle shared by fetchers and extractors."""

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

# Elements whose text is never page content
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]


class Document:
    """
    Queryable HTML document.

    Wraps a BeautifulSoup tree together with the raw markup and the URL it
    came from. A document can be scoped to a single element with
    :meth:`scope`, which lets the same strategies run on a listing item.
    """

    def __init__(self, html: str, url: str = "", root: Optional[Tag] = None) -> None:
        self.html = html
        self.url = url
        if root is None:
            root = BeautifulSoup(html, "lxml")
            for tag in root(NON_CONTENT_TAGS):
                tag.decompose()
        self.root = root

    def scope(self, element: Tag) -> "Document":
        """Document restricted to one element of this tree."""
        return Document(str(element), url=self.url, root=element)

    def select(self, selector: str) -> List[Tag]:
        """All elements matching a CSS selector, in document order."""
        return self.root.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        """First element matching a CSS selector."""
        return self.root.select_one(selector)

    def text_of(self, selector: str) -> str:
        """Text of the first matching element, or an empty string."""
        element = self.select_one(selector)
        if element is None:
            return ""
        return element_text(element)

    def texts_of(self, selector: str, separator: str = "\n") -> str:
        """Text of every matching element, joined."""
        parts = [element_text(el) for el in self.select(selector)]
        return separator.join(part for part in parts if part)

    @property
    def title(self) -> str:
        """Contents of the <title> element."""
        element = self.root.find("title")
        return element_text(element) if element is not None else ""


def element_text(element: Tag) -> str:
    """Visible text of an element, one block per line."""
    return element.get_text(separator="\n", strip=True)
