"""
Database connection management
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import get_database_url, settings
from ..errors import StorageError
from ..logging import get_logger

logger = get_logger(__name__)


def to_async_url(database_url: str) -> str:
    """Switch a plain PostgreSQL DSN to the asyncpg driver."""
    url = make_url(database_url)
    if url.drivername in ("postgresql", "postgres"):
        url = url.set(drivername="postgresql+asyncpg")
    return url.render_as_string(hide_password=False)


def redact_database_url(database_url: str) -> str:
    """Hide the password component of a DSN for logging."""
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except (ArgumentError, ValueError):
        return "<unparseable database url>"


class Database:
    """Owns the async engine and session factory for one process.

    Built once at application startup and handed to the GraphQL layer
    through the request context; `dispose()` releases the pool on shutdown.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        pool_size: int | None = None,
        max_overflow: int | None = None,
        echo: bool | None = None,
    ):
        self.database_url = database_url or get_database_url()
        self.engine: AsyncEngine = create_async_engine(
            to_async_url(self.database_url),
            pool_size=pool_size if pool_size is not None else settings.database_pool_size,
            max_overflow=(
                max_overflow if max_overflow is not None else settings.database_max_overflow
            ),
            echo=echo if echo is not None else settings.sql_echo,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Database initialized", database_url=redact_database_url(self.database_url))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error.

        SQLAlchemy failures are re-raised as `StorageError` so that driver
        details never reach API clients.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    "Database operation failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError() from e
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> tuple[bool, str | None]:
        """
        Test the database connection and return helpful error messages.

        Returns:
            tuple: (success: bool, error_message: str | None)
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True, None
        except Exception as e:
            return False, describe_connection_error(e, self.database_url)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


def describe_connection_error(error: Exception, database_url: str) -> str:
    """Turn a connection failure into an actionable message."""
    error_str = str(error)
    error_type = type(error).__name__

    if "does not exist" in error_str and ("role" in error_str or "database" in error_str):
        db_name = database_name(database_url)
        return (
            f"Cannot connect to database: {error_str}\n"
            f"This usually means:\n"
            f"  1. The database server is not running\n"
            f"  2. The database '{db_name}' doesn't exist\n"
            f"  3. The database user/role doesn't exist\n"
            f"Please check your database connection and run migrations if needed."
        )
    if "Connection refused" in error_str or "could not connect" in error_str:
        return (
            f"Cannot connect to database server: {error_str}\n"
            f"The database server appears to be down or unreachable.\n"
            f"Please check that PostgreSQL is running and accessible."
        )
    if "password authentication failed" in error_str:
        return (
            f"Database authentication failed: {error_str}\n"
            f"Please check your database credentials."
        )
    return f"Database connection error ({error_type}): {error_str}"


def database_name(database_url: str) -> str | None:
    try:
        return make_url(database_url).database
    except (ArgumentError, ValueError):
        return None
