"""Database initialization and schema management."""

import logging

import psycopg

from .connection import Database

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
-- Articles table
CREATE TABLE IF NOT EXISTS articles (
    id SERIAL PRIMARY KEY,
    original_title TEXT NOT NULL,
    original_content TEXT NOT NULL,
    updated_content TEXT,
    reference_links TEXT,
    is_processed BOOLEAN NOT NULL DEFAULT FALSE,
    url TEXT NOT NULL UNIQUE,
    claimed_at TIMESTAMP,
    claim_token TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Selection scans unprocessed rows oldest first
CREATE INDEX IF NOT EXISTS idx_articles_unprocessed
    ON articles(created_at, id) WHERE is_processed = FALSE;

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

DROP TRIGGER IF EXISTS update_articles_updated_at ON articles;
CREATE TRIGGER update_articles_updated_at BEFORE UPDATE ON articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(db: Database) -> bool:
    """Validate database connection."""
    try:
        with db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except (psycopg.Error, RuntimeError) as e:
        logger.error("Database connection failed: %s", e)
        return False


def init_database(db: Database) -> None:
    """Initialize database schema."""
    try:
        with db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully")
    except psycopg.DatabaseError as e:
        logger.error("Failed to initialize database schema: %s", e)
        raise
