"""Data models for the refresh pipeline."""

import time
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class OutcomeStatus(str, Enum):
    """How a claimed article left the pipeline."""

    REWRITTEN = "rewritten"
    NO_RESULTS = "no_results"
    FAILED = "failed"
    CLAIM_LOST = "claim_lost"


class PipelineStage:
    """Timing of one step of an article's refresh."""

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self) -> "PipelineStage":
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.end_time = time.monotonic()

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return 0.0


class RefreshOutcome(BaseModel):
    """Result of processing one article."""

    article_id: int = Field(..., description="Article database ID")
    title: str = Field(..., description="Original article title")
    status: OutcomeStatus = Field(..., description="Terminal status for this run")
    reference_links: List[str] = Field(default_factory=list, description="Search result URLs")
    sources_scraped: int = Field(0, description="Results that yielded usable content")
    error: Optional[str] = Field(None, description="Error message if failed")
    stage_durations: Dict[str, float] = Field(default_factory=dict, description="Seconds per stage")

    @property
    def duration(self) -> float:
        return sum(self.stage_durations.values())
