"""Article storage and claim management."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg
from psycopg import sql

from ..errors import PersistenceFailure
from ..models import Article, encode_reference_links
from .connection import Database

logger = logging.getLogger(__name__)

# Columns a caller may change through update_article
UPDATABLE_COLUMNS = (
    "original_title",
    "original_content",
    "updated_content",
    "reference_links",
    "is_processed",
)


class ArticleStore:
    """Single-table access to the ``articles`` corpus."""

    def __init__(self, db: Database) -> None:
        """
        Initialize article storage.

        Args:
            db: Open database handle owned by the caller
        """
        self.db = db

    def _fetch_one(self, operation: str, query, params=None) -> Optional[Dict[str, Any]]:
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    return cur.fetchone()
        except psycopg.Error as e:
            raise PersistenceFailure(operation, e) from e

    def _fetch_all(self, operation: str, query, params=None) -> List[Dict[str, Any]]:
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    return cur.fetchall()
        except psycopg.Error as e:
            raise PersistenceFailure(operation, e) from e

    def _execute(self, operation: str, query, params=None) -> int:
        """Run a write and return the affected row count."""
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    return cur.rowcount
        except psycopg.Error as e:
            raise PersistenceFailure(operation, e) from e

    def select_unprocessed(self, limit: int = 1) -> List[Article]:
        """Get unprocessed articles, oldest first."""
        rows = self._fetch_all(
            "select_unprocessed",
            """
            SELECT * FROM articles
            WHERE is_processed = FALSE
            ORDER BY created_at, id
            LIMIT %s
            """,
            (limit,),
        )
        return [Article.model_validate(row) for row in rows]

    def claim_next(
        self,
        worker_id: str,
        lease_minutes: int = 30,
        exclude_ids: Sequence[int] = (),
    ) -> Optional[Article]:
        """
        Atomically claim the oldest unprocessed article.

        A claim whose lease has expired is treated as abandoned and may be
        taken over. Rows locked by a concurrent claim are skipped, as are
        the ids in ``exclude_ids``.

        Returns:
            The claimed article, or None when nothing is claimable
        """
        row = self._fetch_one(
            "claim_next",
            """
            UPDATE articles
            SET claimed_at = CURRENT_TIMESTAMP, claim_token = %(token)s
            WHERE id = (
                SELECT id FROM articles
                WHERE is_processed = FALSE
                  AND NOT (id = ANY(%(exclude)s::int[]))
                  AND (
                      claimed_at IS NULL
                      OR claimed_at < CURRENT_TIMESTAMP - make_interval(mins => %(lease)s::int)
                  )
                ORDER BY created_at, id
                LIMIT 1
                FOR UPDATE SKIP LOCKED
            )
            RETURNING *
            """,
            {"token": worker_id, "lease": lease_minutes, "exclude": list(exclude_ids)},
        )
        if row is None:
            return None
        return Article.model_validate(row)

    def mark_processed(self, article_id: int, claim_token: str) -> bool:
        """Terminal transition without content changes (no search results)."""
        count = self._execute(
            "mark_processed",
            """
            UPDATE articles
            SET is_processed = TRUE, claimed_at = NULL, claim_token = NULL
            WHERE id = %s AND is_processed = FALSE AND claim_token = %s
            """,
            (article_id, claim_token),
        )
        if count != 1:
            logger.warning("Article %s was not marked processed: claim lost", article_id)
        return count == 1

    def complete(
        self,
        article_id: int,
        claim_token: str,
        updated_content: str,
        reference_links: List[str],
    ) -> bool:
        """Persist the rewrite and the terminal state in one statement."""
        count = self._execute(
            "complete",
            """
            UPDATE articles
            SET updated_content = %s,
                reference_links = %s,
                is_processed = TRUE,
                claimed_at = NULL,
                claim_token = NULL
            WHERE id = %s AND is_processed = FALSE AND claim_token = %s
            """,
            (updated_content, encode_reference_links(reference_links), article_id, claim_token),
        )
        if count != 1:
            logger.warning("Rewrite for article %s was not saved: claim lost", article_id)
        return count == 1

    def release(self, article_id: int, claim_token: str) -> None:
        """Drop a claim so the article is eligible again."""
        self._execute(
            "release",
            """
            UPDATE articles
            SET claimed_at = NULL, claim_token = NULL
            WHERE id = %s AND is_processed = FALSE AND claim_token = %s
            """,
            (article_id, claim_token),
        )

    def update_article(self, article_id: int, **fields: Any) -> Optional[Article]:
        """
        Update selected columns of one article.

        ``reference_links`` is given as a list and stored encoded.
        ``is_processed`` can only move to true.

        Returns:
            The updated article, or None if it does not exist
        """
        unknown = set(fields) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if "is_processed" in fields and not fields["is_processed"]:
            raise ValueError("is_processed cannot be reset to false")
        if not fields:
            return self.get_article(article_id)

        values = dict(fields)
        if "reference_links" in values:
            values["reference_links"] = encode_reference_links(values["reference_links"])

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder(column))
            for column in values
        )
        query = sql.SQL("UPDATE articles SET {} WHERE id = {} RETURNING *").format(
            assignments, sql.Placeholder("article_id")
        )
        row = self._fetch_one("update_article", query, {**values, "article_id": article_id})
        if row is None:
            return None
        return Article.model_validate(row)

    def upsert_by_url(
        self,
        original_title: str,
        original_content: str,
        url: str,
    ) -> Tuple[int, bool]:
        """
        Insert an article or refresh the title/content of an existing URL.

        Returns:
            Tuple of (article_id, is_new)
        """
        row = self._fetch_one(
            "upsert_by_url",
            """
            INSERT INTO articles (original_title, original_content, url)
            VALUES (%s, %s, %s)
            ON CONFLICT (url) DO UPDATE SET
                original_title = EXCLUDED.original_title,
                original_content = EXCLUDED.original_content
            RETURNING id, (xmax = 0) AS inserted
            """,
            (original_title, original_content, url),
        )
        return row["id"], bool(row["inserted"])

    def get_article(self, article_id: int) -> Optional[Article]:
        """Get article by ID."""
        row = self._fetch_one(
            "get_article",
            "SELECT * FROM articles WHERE id = %s",
            (article_id,),
        )
        if row is None:
            return None
        return Article.model_validate(row)

    def list_articles(
        self,
        limit: int = 50,
        only_processed: Optional[bool] = None,
    ) -> List[Article]:
        """Get articles, newest first."""
        query = "SELECT * FROM articles"
        params: List[Any] = []
        if only_processed is not None:
            query += " WHERE is_processed = %s"
            params.append(only_processed)
        query += " ORDER BY created_at DESC, id DESC LIMIT %s"
        params.append(limit)

        rows = self._fetch_all("list_articles", query, params)
        return [Article.model_validate(row) for row in rows]

    def count_articles(self) -> Dict[str, int]:
        """Corpus counts by state."""
        row = self._fetch_one(
            "count_articles",
            """
            SELECT
                COUNT(*) AS total,
                COUNT(*) FILTER (WHERE is_processed) AS processed,
                COUNT(*) FILTER (WHERE is_processed AND updated_content IS NOT NULL) AS rewritten,
                COUNT(*) FILTER (WHERE NOT is_processed AND claimed_at IS NOT NULL) AS in_flight
            FROM articles
            """,
        )
        return {key: int(value) for key, value in row.items()}
