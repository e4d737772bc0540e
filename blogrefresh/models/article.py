"""Article model for the refresh corpus."""

import json
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import DBModel


def encode_reference_links(links: Optional[List[str]]) -> Optional[str]:
    """Serialize reference links for the text column."""
    if links is None:
        return None
    return json.dumps(list(links))


def decode_reference_links(raw: Optional[str]) -> Optional[List[str]]:
    """Inverse of encode_reference_links."""
    if raw is None or raw == "":
        return None
    links = json.loads(raw)
    if not isinstance(links, list) or not all(isinstance(link, str) for link in links):
        raise ValueError("reference_links must encode a list of strings")
    return links


class Article(DBModel):
    """Article model."""

    original_title: str = Field(..., description="Title captured at ingestion")
    original_content: str = Field(..., description="Body captured at ingestion")
    url: str = Field(..., description="Unique source URL")
    updated_content: Optional[str] = Field(None, description="Rewritten markdown body")
    reference_links: Optional[List[str]] = Field(None, description="Source URLs used for the rewrite")
    is_processed: bool = Field(False, description="Terminal pipeline state")
    claimed_at: Optional[datetime] = Field(None, description="When a worker claimed the article")
    claim_token: Optional[str] = Field(None, description="Token of the claiming worker")

    @field_validator("reference_links", mode="before")
    @classmethod
    def parse_reference_links(cls, v):
        """Rows carry the links as a JSON string."""
        if isinstance(v, str):
            return decode_reference_links(v)
        return v

    @property
    def has_rewrite(self) -> bool:
        """Whether the pipeline produced new content."""
        return self.updated_content is not None
