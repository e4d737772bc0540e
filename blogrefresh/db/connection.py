"""Database connection management."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "blogrefresh")
        self.user = config.get("user", "blogrefresh")
        self.password = config.get("password") or ""
        self.min_pool_size = config.get("min_pool_size", 1)
        self.max_pool_size = config.get("max_pool_size", 4)
        self.connect_timeout = config.get("connect_timeout", 10.0)

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        return make_conninfo(
            "",
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password or None,
        )


class Database:
    """
    Owns the connection pool for one process.

    Open it once at startup (``with Database(cfg) as db:``) and hand it to
    the components that need storage; leaving the block closes the pool.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = DatabaseConfig(config)
        self._pool: Optional[ConnectionPool] = None

    def open(self) -> "Database":
        """Create the pool."""
        if self._pool is None:
            logger.debug(
                "Opening connection pool to %s:%s/%s",
                self.config.host,
                self.config.port,
                self.config.database,
            )
            self._pool = ConnectionPool(
                self.config.connection_string,
                min_size=self.config.min_pool_size,
                max_size=self.config.max_pool_size,
                kwargs={"row_factory": dict_row},
                timeout=self.config.connect_timeout,
                open=True,
            )
        return self

    def close(self) -> None:
        """Close the pool and every connection in it."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection, None, None]:
        """Borrow a connection; the transaction commits when the block exits cleanly."""
        if self._pool is None:
            raise RuntimeError("Database is not open")
        with self._pool.connection() as conn:
            yield conn
