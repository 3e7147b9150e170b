"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.configs import pool_kwargs, settings
from app.errors.base import BaseAppError
from app.errors.database import DatabaseInitializationError
from app.monitoring import get_logger

logger = get_logger(__name__)


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Created during application startup and stored on ``app.state.database``;
    request handlers reach it through the ``get_session`` dependency.
    """

    def __init__(self, url: str | None = None, *, echo: bool | None = None) -> None:
        """
        Create the engine and session factory.

        Args:
            url: SQLAlchemy async URL (defaults to ``settings.DATABASE_URL``)
            echo: Whether to echo SQL (defaults to ``settings.DATABASE_ECHO``)
        """
        self.url = url or settings.DATABASE_URL
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.DATABASE_ECHO if echo is None else echo,
            **pool_kwargs(self.url),
        )
        if settings.DEBUG:
            _configure_engine_events(self.engine)

        self.session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
            self.engine,
            class_=SQLModelAsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init_models(self) -> None:
        """
        Create all tables defined in SQLModel models.

        Note:
            Intended for development and tests. Deployed databases are
            migrated with Alembic.
        """
        # Import all models to ensure they are registered
        from app.models import BlogDB, UserDB  # noqa: F401, PLC0415

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except Exception as e:
            logger.exception("Database initialization failed")
            raise DatabaseInitializationError from e
        logger.info("Database initialized successfully!")

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database ping failed")
            return False
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """
        Context manager for explicit transaction management.

        Yields:
            AsyncSession: Database session within a transaction

        Example:
            ```python
            async with database.transaction() as session:
                session.add(UserDB(username="jane_doe", ...))
                # Commits on successful exit, rolls back on exception
            ```
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except BaseAppError as e:
                await session.rollback()
                logger.info(f"Transaction rolled back: {e.detail}")
                raise
            except Exception:
                await session.rollback()
                logger.exception("Transaction error")
                raise

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")


def get_database(request: Request) -> Database:
    """Return the database attached to the running application."""
    return request.app.state.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session committed when the request succeeds
    """
    async with get_database(request).transaction() as session:
        yield session
