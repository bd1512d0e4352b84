"""
Character API - Connection Pool
================================

What:  A bounded pool of reusable async connections to the relational store.
How:   Wraps a SQLAlchemy AsyncEngine (AsyncAdaptedQueuePool underneath) and
       translates driver failures into the application's exception types.
Who:   Built once by the app factory, stored on `app.state.pool`, and handed
       to services through the `get_pool` dependency.
When:  Connections are checked out per statement and returned immediately.

Connection Pooling Strategy:
    pool_size=DB_POOL_SIZE (10):  hard connection ceiling
    max_overflow=0:               no temporary connections beyond the ceiling
    pool_timeout=DB_POOL_TIMEOUT: None → callers wait indefinitely in the
                                  pool's queue; the queue has no length limit
    pool_pre_ping:                validates connections before use
    pool_recycle=3600:            recycles connections every hour

Error Translation:
    failure while checking out a connection    → DatabaseConnectionError
    connection invalidated during a statement  → DatabaseConnectionError
    any other statement failure                → QueryError
    Nothing is retried.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Mapping, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.sql.elements import TextClause

from character_api.config import Settings
from character_api.exceptions import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    """Short, single-line reason for a driver failure (no SQL, no traceback)."""
    orig = getattr(exc, "orig", None)
    reason = str(orig if orig is not None else exc).strip().splitlines()
    return reason[0] if reason else type(exc).__name__


class ConnectionPool:
    """
    Hands out pooled connections and runs single read-only statements.

    Contract:
        acquire()    → AsyncConnection (waits when the ceiling is reached)
        release(c)   → returns the connection to the pool
        connection() → async context manager pairing acquire/release
        fetch_one()  → first row of a statement as a dict, or None
        fetch_scalar() → first column of the first row
        ping()       → runs a trivial statement (diagnostics)
        dispose()    → closes every pooled connection
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionPool":
        """Creates the engine from configuration. No connection is opened here."""
        engine = create_async_engine(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            max_overflow=0,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        return cls(engine)

    async def acquire(self) -> AsyncConnection:
        """
        Check a connection out of the pool.

        Raises:
            DatabaseConnectionError: the store could not be reached.
        """
        try:
            return await self.engine.connect()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Could not acquire database connection: %s", _describe(e))
            raise DatabaseConnectionError(
                reason=_describe(e),
                context={"error_type": type(e).__name__},
            ) from e

    async def release(self, conn: AsyncConnection) -> None:
        """Return a connection to the pool (rolls back the implicit read transaction)."""
        await conn.close()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        conn = await self.acquire()
        try:
            yield conn
        finally:
            await self.release(conn)

    async def _execute(
        self,
        conn: AsyncConnection,
        statement: TextClause,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        try:
            return await conn.execute(statement, dict(params or {}))
        except DBAPIError as e:
            if e.connection_invalidated:
                raise DatabaseConnectionError(
                    reason=_describe(e),
                    context={"error_type": type(e).__name__},
                ) from e
            logger.error("Statement failed: %s", _describe(e))
            raise QueryError(
                reason=_describe(e),
                context={"statement": str(statement), "error_type": type(e).__name__},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Statement failed: %s", _describe(e))
            raise QueryError(
                reason=_describe(e),
                context={"statement": str(statement), "error_type": type(e).__name__},
            ) from e

    async def fetch_one(
        self,
        statement: TextClause,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """First row as a column → value dict, or None for an empty result."""
        async with self.connection() as conn:
            result = await self._execute(conn, statement, params)
            row = result.mappings().first()
            return dict(row) if row is not None else None

    async def fetch_scalar(
        self,
        statement: TextClause,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        async with self.connection() as conn:
            result = await self._execute(conn, statement, params)
            return result.scalar()

    async def ping(self, sql: str = "SELECT 1") -> Optional[Dict[str, Any]]:
        """Runs a trivial statement; used by /db, / and the startup check."""
        return await self.fetch_one(text(sql))

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Pool Dependency ───────────────────────────────────────────────────────
def get_pool(request: Request) -> ConnectionPool:
    """
    FastAPI dependency returning the pool owned by the running application.

    The pool is created by create_app() and stored on app.state; tests
    supply their own pool to create_app().
    """
    return request.app.state.pool
