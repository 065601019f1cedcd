"""Database helpers for the ratings store."""

import logging
import threading
from contextlib import contextmanager
from typing import Optional, Tuple

from psycopg2 import pool

from shelter_match.core.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.ThreadedConnectionPool] = None
_pool_lock = threading.Lock()


def init_pool(minconn: int = 1, maxconn: Optional[int] = None) -> pool.ThreadedConnectionPool:
    """Initialise and return the shared connection pool.

    Rating lookups run on worker threads, so the pool must be the threaded
    variant and creation happens under a lock. ``maxconn`` defaults to the
    configured lookup concurrency.
    """
    global _connection_pool
    if _connection_pool is not None:
        return _connection_pool
    with _pool_lock:
        if _connection_pool is None:
            settings = get_settings()
            if not settings.database_url:
                raise RuntimeError("DATABASE_URL is required for database connections")
            if maxconn is None:
                maxconn = settings.rating_lookup_concurrency
            _connection_pool = pool.ThreadedConnectionPool(
                minconn,
                maxconn,
                dsn=settings.database_url,
                connect_timeout=10,
            )
            logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_RATING_STATS = """
SELECT
    COALESCE(AVG(rating), 0) AS average_rating,
    COUNT(*) AS total_ratings
FROM ratings
WHERE organization_id = %(organization_id)s;
"""


def fetch_rating_stats(organization_id: str) -> Tuple[float, int]:
    """Return ``(average_rating, total_ratings)`` for one organization."""
    if not organization_id:
        raise ValueError("organization_id is required for rating lookups")

    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_RATING_STATS, {"organization_id": str(organization_id)})
            row = cur.fetchone()

    if not row:
        return 0.0, 0
    average, total = row
    return float(average or 0), int(total or 0)
