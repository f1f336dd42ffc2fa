"""
Core database utilities - connection pool, helpers, configuration.
"""
from __future__ import annotations

import os
from contextlib import contextmanager

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from logging_config import logger

# Database connection configuration
DATABASE_URL = os.environ.get("DATABASE_URL", "")
MIN_CONNECTIONS = int(os.environ.get("DB_MIN_CONN", "1"))
MAX_CONNECTIONS = int(os.environ.get("DB_MAX_CONN", "5"))
POOL_WAIT_TIMEOUT = int(os.environ.get("DB_POOL_WAIT_TIMEOUT", "60"))


def mask_database_url(url: str) -> str:
    """Hide credentials before logging a connection string."""
    return url.split("@")[1] if "@" in url else url


class DatabaseCore:
    """Core database functionality - connection pool and base operations."""

    def __init__(self, database_url: str | None = None):
        """Initialize PostgreSQL database connection."""
        self.database_url = database_url or DATABASE_URL
        self.db_name = "PostgreSQL"

        if not self.database_url:
            raise ValueError("DATABASE_URL environment variable is required for PostgreSQL")

        logger.info(f"Attempting to connect to: ...@{mask_database_url(self.database_url)}")

        try:
            self.pool = ConnectionPool(
                conninfo=self.database_url,
                min_size=MIN_CONNECTIONS,
                max_size=MAX_CONNECTIONS,
                timeout=POOL_WAIT_TIMEOUT,
                kwargs={"row_factory": dict_row},
                open=True,
            )
            logger.info(
                f"PostgreSQL connection pool created (min={MIN_CONNECTIONS}, max={MAX_CONNECTIONS})"
            )
        except Exception as e:
            logger.error(f"Failed to create PostgreSQL connection pool: {e}")
            raise

    @contextmanager
    def get_connection(self):
        """Context manager for database connections from pool.

        Everything executed inside the block is one transaction.
        """
        with self.pool.connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Database error: {e}")
                raise

    def close(self):
        """Close all connections in the pool."""
        if hasattr(self, "pool") and self.pool:
            self.pool.close()
            logger.info("PostgreSQL connection pool closed")
