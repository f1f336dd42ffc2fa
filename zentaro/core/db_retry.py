"""Database retry logic with exponential backoff."""
from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from zentaro.core.constants import CART_SYNC_MAX_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    name: str,
    max_attempts: int = 3,
    initial_delay: float = 0.1,
    max_delay: float = CART_SYNC_MAX_DELAY,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,),
) -> T:
    """Await ``func`` until it succeeds or ``max_attempts`` is exhausted.

    Args:
        func: Zero-argument coroutine factory
        name: Operation name used in log lines
        max_attempts: Maximum number of attempts
        initial_delay: Delay before the second attempt, in seconds
        max_delay: Upper bound for the delay between attempts
        exponential_base: Multiplier applied to the delay after each failure
        exceptions: Exceptions that trigger another attempt

    Raises:
        The last exception once every attempt failed.
    """
    delay = initial_delay
    last_exception = None

    for attempt in range(max_attempts):
        try:
            return await func()
        except exceptions as e:
            last_exception = e
            if attempt < max_attempts - 1:
                logger.warning(
                    f"DB operation {name} failed (attempt {attempt + 1}/{max_attempts}): {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                await asyncio.sleep(delay)
                delay = min(delay * exponential_base, max_delay)
            else:
                logger.error(f"DB operation {name} failed after {max_attempts} attempts: {e}")

    raise last_exception


def db_retry(
    max_attempts: int = 3,
    initial_delay: float = 0.1,
    max_delay: float = 5.0,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,),
):
    """Retry decorator with exponential backoff for sync database operations.

    Example:
        @db_retry(max_attempts=3, exceptions=(psycopg.OperationalError,))
        def list_products():
            return db.list_products()
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = initial_delay
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        logger.warning(
                            f"DB operation {func.__name__} failed (attempt {attempt + 1}/{max_attempts}): {e}. "
                            f"Retrying in {delay:.2f}s..."
                        )
                        time.sleep(delay)
                        delay = min(delay * exponential_base, max_delay)
                    else:
                        logger.error(
                            f"DB operation {func.__name__} failed after {max_attempts} attempts: {e}"
                        )

            raise last_exception

        return wrapper

    return decorator


class DBHealthCheck:
    """Database health check utility."""

    def __init__(self, db: Any):
        self.db = db

    def is_healthy(self) -> bool:
        """Run ``SELECT 1`` against the pool."""
        try:
            with self.db.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT 1")
                return cursor.fetchone() is not None
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
