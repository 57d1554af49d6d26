"""Connection Pool Manager: bounded async connection pool with guaranteed release.

Invariants:
    - Every acquired connection is released exactly once, on every exit path
    - A caller never holds more than one connection per connection() block
    - Acquisition waits at most pool_timeout seconds; with queue_limit > 0 at most
      queue_limit callers wait, the rest fail immediately
    - All SQLAlchemy exceptions mapped to StoreUnavailableError / QueryFailureError;
      any other driver exception becomes QueryFailureError
    - open() fails with StoreUnavailableError when the store is unreachable

Design Decisions:
    - Instance owned by the application lifespan and injected, never a module global
    - asyncio.Semaphore gates acquisition: SQLAlchemy's pool has no waiter limit
    - SQLite URLs skip pool sizing arguments (tests and local development only)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import (
    DBAPIError, OperationalError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from student_records.core.errors import (
    QueryFailureError, StoreUnavailableError, StudentRecordsError,
)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine and hands out pooled connections per operation."""

    def __init__(
        self,
        database_url: str | URL,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
        queue_limit: int = 0,
        pool_recycle: int = 3600,
    ):
        url = make_url(database_url)
        engine_kwargs: dict = {"pool_pre_ping": True}
        if url.get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.pool_timeout = pool_timeout
        self.queue_limit = queue_limit
        self.capacity = pool_size + max_overflow
        self._slots = asyncio.Semaphore(self.capacity)
        self._waiting = 0
        self._checked_out = 0

    @property
    def checked_out(self) -> int:
        """Connections currently held by callers."""
        return self._checked_out

    @property
    def waiting(self) -> int:
        """Callers currently queued for a connection."""
        return self._waiting

    async def open(self) -> None:
        """Verify the store answers; raise StoreUnavailableError otherwise."""
        async with self.connection("connect") as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database pool closed")

    async def _acquire_slot(self, operation: str) -> None:
        if self.queue_limit and self._slots.locked() and self._waiting >= self.queue_limit:
            logger.warning(
                "Connection queue limit reached",
                extra={"operation": operation, "count": self._waiting},
            )
            raise StoreUnavailableError("connection queue limit reached", operation)
        self._waiting += 1
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.pool_timeout)
        except asyncio.TimeoutError:
            raise StoreUnavailableError(
                f"no connection available within {self.pool_timeout}s", operation,
            )
        finally:
            self._waiting -= 1

    @asynccontextmanager
    async def connection(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncConnection, None]:
        """Provide a pooled connection; release it and translate driver errors."""
        await self._acquire_slot(operation)
        try:
            async with self.engine.connect() as conn:
                self._checked_out += 1
                try:
                    yield conn
                finally:
                    self._checked_out -= 1
        except (OperationalError, PoolTimeoutError) as e:
            logger.error(f"DB operational error: {e}", extra={"operation": operation})
            raise StoreUnavailableError("connection or operational error", operation) from e
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}", extra={"operation": operation})
            raise QueryFailureError("database driver error", operation) from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}", extra={"operation": operation})
            raise QueryFailureError("database operation failed", operation) from e
        except OSError as e:
            logger.error(f"DB socket error: {e}", extra={"operation": operation})
            raise StoreUnavailableError("store unreachable", operation) from e
        except StudentRecordsError:
            raise
        except Exception as e:
            logger.error(
                f"Unexpected driver error: {type(e).__name__}: {e}",
                extra={"operation": operation},
            )
            raise QueryFailureError("unexpected driver error", operation) from e
        finally:
            self._slots.release()

    async def health_check(self) -> bool:
        """Check database connectivity (used by the readiness endpoint)."""
        try:
            async with self.connection("health_check") as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (StoreUnavailableError, QueryFailureError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
