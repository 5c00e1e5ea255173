"""
Database Connection Management

The Database handle owns the async engine (and its connection pool) and the
session factory. It is constructed by the process entry point, passed to the
services that need it, and disposed on shutdown.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront.config.settings import DatabaseSettings
from storefront.exceptions import StoreUnavailable

logger = structlog.get_logger(__name__)

# Drivers report unreachable servers as OSError (ConnectionRefusedError,
# TimeoutError) rather than through the DBAPI exception hierarchy.
STORE_ERRORS = (SQLAlchemyError, OSError)

IMMEDIATE_TRANSACTION = "storefront_immediate"


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    Make SQLite write transactions take the write lock when they begin.

    pysqlite defers BEGIN until the first write, so two transactions could
    both read the same inventory count before either writes. BEGIN IMMEDIATE
    serialises them the way a row lock does on PostgreSQL. Connections not
    flagged with IMMEDIATE_TRANSACTION use a plain deferred BEGIN, so reads
    never queue behind writers.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(IMMEDIATE_TRANSACTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


class Database:
    """
    Handle on the relational store.

    Example:
        database = Database.from_settings(settings.database)
        await database.connect()
        async with database.transaction() as session:
            await session.execute(query)
        await database.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: int = 30,
    ):
        self.url = url
        self.backend = make_url(url).get_backend_name()

        engine_config = {
            "echo": echo,
            "pool_pre_ping": True,
        }
        if self.backend != "sqlite":
            engine_config.update({
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_timeout": pool_timeout,
            })

        self.engine: AsyncEngine = create_async_engine(url, **engine_config)
        if self.backend == "sqlite":
            _use_immediate_transactions(self.engine)

        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "Database":
        return cls(
            settings.async_url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
        )

    async def connect(self) -> None:
        """
        Verify the store is reachable.

        Raises:
            StoreUnavailable: If a connection cannot be established
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except STORE_ERRORS as e:
            logger.error("Failed to connect to database", backend=self.backend, error=str(e))
            raise StoreUnavailable(f"cannot connect to the database: {e}") from e

        logger.info("Database connection established", backend=self.backend)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database connection pool closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session for read-only work. Nothing is committed.

        Yields:
            AsyncSession: Database session
        """
        session = self._session_factory()
        try:
            yield session
        except STORE_ERRORS as e:
            logger.error("Database query failed", error=str(e), error_type=type(e).__name__)
            raise StoreUnavailable(str(e) or type(e).__name__) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session wrapped in a single transaction.

        Commits when the block exits normally and rolls back on any
        exception, so an early exit never leaves partial writes behind.
        Store errors are re-raised as StoreUnavailable; every other
        exception propagates unchanged after the rollback.

        Yields:
            AsyncSession: Database session
        """
        session = self._session_factory()
        try:
            if self.backend == "sqlite":
                await session.connection(execution_options={IMMEDIATE_TRANSACTION: True})
            yield session
            await session.commit()
            logger.debug("Database transaction committed")
        except STORE_ERRORS as e:
            logger.error("Database transaction failed, rolling back", error=str(e), error_type=type(e).__name__)
            await self._rollback(session)
            raise StoreUnavailable(str(e) or type(e).__name__) from e
        except BaseException:
            await self._rollback(session)
            raise
        finally:
            await session.close()

    async def _rollback(self, session: AsyncSession) -> None:
        try:
            await session.rollback()
        except STORE_ERRORS as e:
            logger.warning("Rollback failed", error=str(e))

    async def health(self) -> dict:
        """
        Check database health status.

        Returns:
            dict: Health status with latency information
        """
        try:
            start = time.perf_counter()
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy",
                "latency_ms": round(latency_ms, 2),
                "backend": self.backend,
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }


def create_database(settings: DatabaseSettings, url: Optional[str] = None) -> Database:
    """Build a Database handle from settings, optionally overriding the URL."""
    if url is not None:
        settings = settings.model_copy(update={"url": url})
    return Database.from_settings(settings)
