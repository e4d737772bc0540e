"""Error taxonomy for the refresh pipeline."""

from typing import Optional


class RefreshError(Exception):
    """Base class for all pipeline errors."""


class FetchFailure(RefreshError):
    """A document could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class NetworkError(FetchFailure):
    """DNS, connection, timeout or HTTP status failure."""


class NavigationError(FetchFailure):
    """Browser navigation was rejected or timed out."""


class ExtractionEmpty(RefreshError):
    """No extraction heuristic produced a long enough result."""

    def __init__(self, url: str, min_length: int) -> None:
        super().__init__(f"{url}: no content longer than {min_length} characters")
        self.url = url
        self.min_length = min_length


class RewriteFailure(RefreshError):
    """The completion service call failed."""


class RewriteTimeout(RewriteFailure):
    """The completion service did not answer in time."""


class PersistenceFailure(RefreshError):
    """A storage read or write failed."""

    def __init__(self, operation: str, cause: Optional[Exception] = None) -> None:
        message = f"Storage operation '{operation}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation


class PipelineTimeout(RefreshError):
    """Processing of a single article exceeded its time bound."""
