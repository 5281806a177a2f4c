"""
Database Connection Management

Async connection pool with SQLAlchemy 2.0. The pool is owned by an explicit
Database object created at startup and handed to request handlers, so every
unit of work borrows one connection and gives it back on every exit path.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from studio.config.settings import DatabaseSettings
from studio.database.models import Base

logger = structlog.get_logger(__name__)


class Database:
    """
    Storage client wrapping an async engine and its session factory.

    The engine keeps ``pool_size`` connections open, grows by up to
    ``max_overflow`` under load and makes callers wait ``pool_timeout``
    seconds for a free connection before failing.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 2,
        max_overflow: int = 8,
        pool_timeout: int = 60,
        echo: bool = False,
    ):
        engine_config = {
            "echo": echo,
            "pool_pre_ping": True,
        }

        if url.startswith("sqlite"):
            # One shared connection so an in-memory database survives between sessions
            engine_config.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        else:
            engine_config.update({
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_timeout": pool_timeout,
            })

        self.url = url
        self.pool_size = pool_size
        self.engine: AsyncEngine = create_async_engine(url, **engine_config)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "Database":
        """Build a Database from the POSTGRES_* settings section."""
        return cls(
            settings.async_url,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            echo=settings.echo,
        )

    async def connect(self) -> None:
        """
        Verify the database is reachable.

        Raises:
            SQLAlchemyError: If no connection can be established
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection established", url=self.engine.url.render_as_string())
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            raise

    async def create_all(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured", tables=sorted(Base.metadata.tables))

    async def dispose(self) -> None:
        """
        Close the connection pool.

        Gracefully closes all connections in the pool.
        """
        await self.engine.dispose()
        logger.info("Database connection pool closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Run one unit of work.

        Commits when the block finishes, rolls back and re-raises on any
        error, and always returns the connection to the pool. Only storage
        errors are logged at error level.

        Example:
            async with database.session() as db:
                await db.execute(query)
        """
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database session error, rolling back", error=str(e), error_type=type(e).__name__)
            await session.rollback()
            raise
        except Exception as e:
            logger.debug("Unit of work aborted, rolling back", error_type=type(e).__name__)
            await session.rollback()
            raise
        finally:
            await session.close()

    async def check_health(self) -> dict:
        """
        Check database health status.

        Returns:
            dict: Health status with latency information
        """
        try:
            start = time.perf_counter()
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy",
                "latency_ms": round(latency_ms, 2),
                "pool_size": self.pool_size,
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the application's Database.

    Example:
        @router.get("/items")
        async def get_items(database: Database = Depends(get_database)):
            async with database.session() as db:
                ...
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        logger.error("Database not initialized when get_database() called")
        raise RuntimeError("Database not initialized")
    return database
