"""Content refresh pipeline."""

from .models import OutcomeStatus, RefreshOutcome
from .orchestrator import PipelineOrchestrator, print_refresh_summary

__all__ = ["OutcomeStatus", "PipelineOrchestrator", "RefreshOutcome", "print_refresh_summary"]
