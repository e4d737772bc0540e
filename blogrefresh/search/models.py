"""Data models for search and competitor scraping."""

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """One eligible link from a search results page."""

    title: str = Field(..., description="Link text")
    url: str = Field(..., description="Target URL")


class ScrapedSource(BaseModel):
    """Competitor page that yielded usable content."""

    url: str = Field(..., description="Page URL")
    title: str = Field(..., description="Search result title")
    content_excerpt: str = Field(..., description="Extracted text, truncated")

    def render(self) -> str:
        """Block used in the joined competitor corpus."""
        return f"Source: {self.url}\nTitle: {self.title}\nContent: {self.content_excerpt}..."
