"""Data models for fetching."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import FetchFailure, NavigationError
from ..extraction import Document


class FetchResult(BaseModel):
    """Outcome of retrieving one URL."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str = Field(..., description="Requested URL")
    success: bool = Field(..., description="Whether a document was retrieved")
    document: Optional[Document] = Field(None, description="Parsed document on success")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_kind: Optional[str] = Field(None, description="network, navigation or not_html")

    @classmethod
    def ok(cls, url: str, document: Document) -> "FetchResult":
        return cls(url=url, success=True, document=document)

    @classmethod
    def failed(cls, url: str, error: FetchFailure, kind: Optional[str] = None) -> "FetchResult":
        if kind is None:
            kind = "navigation" if isinstance(error, NavigationError) else "network"
        return cls(url=url, success=False, error=error.reason, error_kind=kind)
