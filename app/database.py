"""
Database handle shared by the progress store and the access gate.

One Database is built at startup, kept on app.state, and disposed on shutdown.
Requests get sessions from it through the get_db dependency.
"""
import asyncio
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.exceptions import StoreError, StoreUnavailable

logger = logging.getLogger(__name__)

# asyncio.TimeoutError only became an alias of TimeoutError in Python 3.11
STORE_TIMEOUTS = (TimeoutError, asyncio.TimeoutError)
STORE_FAILURES = (SQLAlchemyError,) + STORE_TIMEOUTS


class Base(DeclarativeBase):
    pass


class Database:
    """Long-lived engine plus session factory for one connection string."""

    def __init__(self, url: str, echo: bool = False):
        if not url:
            raise StoreUnavailable("DATABASE_URL is not set.")
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self) -> None:
        """Create missing tables and ping the database.

        Raises:
            StoreUnavailable: if the database cannot be reached.
        """
        # Register tables on Base.metadata
        import app.models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            await self.ping()
        except SQLAlchemyError as e:
            logger.error("Error connecting to database %s: %s", self.engine.url, e)
            raise StoreUnavailable(
                "Failed to connect to the database. Please check your connection settings."
            ) from e
        except OSError as e:
            logger.error("Connection to database %s failed: %s", self.engine.url, e)
            raise StoreUnavailable(
                "Database connection failed. Please check if the server is running and accessible."
            ) from e

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()

    def session(self) -> AsyncSession:
        return self.session_factory()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session from the application's Database."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise StoreUnavailable("Database is not initialized.")
    async with database.session() as session:
        yield session


def store_error(exc: Exception) -> StoreError:
    """Wrap a database exception, keeping the proximate cause in the message.

    Only lost connections and timeouts count as unavailable; anything else,
    schema faults included, is a plain StoreError.
    """
    if isinstance(exc, (InterfaceError,) + STORE_TIMEOUTS) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return StoreUnavailable(f"Database unavailable: {exc}")
    return StoreError(f"Database error: {exc}")
