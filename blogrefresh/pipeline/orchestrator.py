"""Pipeline orchestrator: claim, search, scrape, rewrite, commit."""

import asyncio
import logging
import os
import socket
import uuid
from typing import Callable, Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..config import ConfigModel
from ..db import ArticleStore
from ..errors import PersistenceFailure, PipelineTimeout
from ..fetching import BrowserSession
from ..generation import Rewriter
from ..models import Article
from ..search import Searcher, join_sources, scrape_results
from .models import OutcomeStatus, PipelineStage, RefreshOutcome

logger = logging.getLogger(__name__)
console = Console()


def default_worker_id() -> str:
    """Claim token identifying this process."""
    return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:8]}"


class PipelineOrchestrator:
    """Drive unprocessed articles through the refresh pipeline."""

    def __init__(
        self,
        store: ArticleStore,
        rewriter: Rewriter,
        config: Optional[ConfigModel] = None,
        session_factory: Optional[Callable[[], BrowserSession]] = None,
        worker_id: Optional[str] = None,
    ) -> None:
        """
        Initialize pipeline orchestrator.

        Args:
            store: Article storage
            rewriter: Rewrite step
            config: Full configuration
            session_factory: Builds the per-run browser session
            worker_id: Claim token (default: host, pid and a random suffix)
        """
        self.store = store
        self.rewriter = rewriter
        self.config = config or ConfigModel()
        self.session_factory = session_factory or (lambda: BrowserSession(self.config.browser))
        self.worker_id = worker_id or default_worker_id()

    def _claim(self, exclude_ids: Sequence[int] = ()) -> Optional[Article]:
        article = self.store.claim_next(
            self.worker_id,
            self.config.pipeline.lease_minutes,
            exclude_ids=exclude_ids,
        )
        if article is not None:
            logger.debug("Claimed article %s as %s", article.id, self.worker_id)
        return article

    def _release(self, article: Article) -> None:
        try:
            self.store.release(article.id, self.worker_id)
        except Exception:
            logger.exception("Could not release claim on article %s", article.id)

    def _claim_following(self, outcomes: List[RefreshOutcome]) -> Optional[Article]:
        """
        Claim the next article of a batch.

        Articles already attempted in this run are skipped, so a released
        failure is retried by a later run rather than the rest of this batch.
        A storage error ends the batch and keeps the outcomes gathered so far.
        """
        try:
            return self._claim(exclude_ids=[outcome.article_id for outcome in outcomes])
        except PersistenceFailure as e:
            logger.error("Could not claim the next article; ending batch early: %s", e)
            return None

    async def run(self, batch_size: Optional[int] = None) -> List[RefreshOutcome]:
        """
        Process up to ``batch_size`` articles, one at a time.

        The browser is launched only when an article has been claimed and is
        closed once at the end of the run.
        """
        if batch_size is None:
            batch_size = self.config.pipeline.batch_size

        outcomes: List[RefreshOutcome] = []
        article = self._claim()
        if article is None:
            logger.info("No unprocessed articles found.")
            return outcomes

        try:
            async with self.session_factory() as session:
                searcher = Searcher(session, self.config.search)
                while article is not None:
                    outcomes.append(await self.process_article(article, session, searcher))
                    article = None
                    if len(outcomes) < batch_size:
                        article = self._claim_following(outcomes)
        except BaseException:
            # Browser failed to start or the run was interrupted mid-article
            if article is not None:
                self._release(article)
            raise

        return outcomes

    async def process_article(
        self,
        article: Article,
        session,
        searcher: Searcher,
    ) -> RefreshOutcome:
        """
        Refresh one claimed article.

        Any failure not absorbed by a component releases the claim, leaving
        the article unprocessed for a later run.
        """
        logger.info("Processing article %s: %s", article.id, article.original_title)
        stages: Dict[str, PipelineStage] = {}
        timeout = self.config.pipeline.article_timeout_seconds

        try:
            return await asyncio.wait_for(
                self._refresh(article, session, searcher, stages),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            error: Exception = PipelineTimeout(f"processing exceeded {timeout:.0f}s")
        except Exception as e:
            error = e
        except BaseException:
            self._release(article)
            raise

        logger.error("Error processing article %s: %s", article.id, error, exc_info=error)
        self._release(article)
        return RefreshOutcome(
            article_id=article.id,
            title=article.original_title,
            status=OutcomeStatus.FAILED,
            error=str(error) or type(error).__name__,
            stage_durations=_durations(stages),
        )

    async def _refresh(
        self,
        article: Article,
        session,
        searcher: Searcher,
        stages: Dict[str, PipelineStage],
    ) -> RefreshOutcome:
        with _stage(stages, "search"):
            results = await searcher.search(article.original_title)

        if not results:
            logger.info("No links found for article %s. Marking processed without changes.", article.id)
            with _stage(stages, "persist"):
                saved = self.store.mark_processed(article.id, self.worker_id)
            return RefreshOutcome(
                article_id=article.id,
                title=article.original_title,
                status=OutcomeStatus.NO_RESULTS if saved else OutcomeStatus.CLAIM_LOST,
                stage_durations=_durations(stages),
            )

        with _stage(stages, "scrape"):
            sources = await scrape_results(session, results, self.config.extraction)

        with _stage(stages, "rewrite"):
            updated_content = await self.rewriter.rewrite(
                article.original_title,
                article.original_content,
                join_sources(sources),
            )

        reference_links = [result.url for result in results]
        with _stage(stages, "persist"):
            saved = self.store.complete(article.id, self.worker_id, updated_content, reference_links)

        if saved:
            logger.info("Article %s updated successfully.", article.id)

        return RefreshOutcome(
            article_id=article.id,
            title=article.original_title,
            status=OutcomeStatus.REWRITTEN if saved else OutcomeStatus.CLAIM_LOST,
            reference_links=reference_links,
            sources_scraped=len(sources),
            stage_durations=_durations(stages),
        )


def _stage(stages: Dict[str, PipelineStage], name: str) -> PipelineStage:
    stage = PipelineStage(name)
    stages[name] = stage
    return stage


def _durations(stages: Dict[str, PipelineStage]) -> Dict[str, float]:
    return {name: stage.duration for name, stage in stages.items()}


def print_refresh_summary(outcomes: List[RefreshOutcome]) -> None:
    """Print summary of a refresh run."""
    if not outcomes:
        console.print("[yellow]No unprocessed articles found.[/yellow]")
        return

    table = Table(title="Refresh Summary")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Sources", justify="right")
    table.add_column("Duration", style="yellow")
    table.add_column("Details", style="dim")

    styles = {
        OutcomeStatus.REWRITTEN: "[green]rewritten[/green]",
        OutcomeStatus.NO_RESULTS: "[yellow]no results[/yellow]",
        OutcomeStatus.FAILED: "[red]failed[/red]",
        OutcomeStatus.CLAIM_LOST: "[magenta]claim lost[/magenta]",
    }

    for outcome in outcomes:
        sources = f"{outcome.sources_scraped}/{len(outcome.reference_links)}"
        details = outcome.error or ", ".join(outcome.reference_links)
        table.add_row(
            str(outcome.article_id),
            outcome.title[:60],
            styles[outcome.status],
            sources,
            f"{outcome.duration:.1f}s",
            details,
        )

    console.print(table)
