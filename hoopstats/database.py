"""Database connection and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

# Register table metadata before create_all
from hoopstats import models  # noqa: F401
from hoopstats.config import DatabaseConfig
from hoopstats.errors import StorageError


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_config(config: DatabaseConfig) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    PostgreSQL gets a sized connection pool. SQLite uses SQLAlchemy's default
    pool and has foreign key enforcement switched on per connection.
    """
    if config.is_sqlite:
        engine = create_async_engine(config.url, echo=config.echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_pre_ping=True,
    )


class Database:
    """Owns the async engine and session factory for one application instance."""

    def __init__(self, config: DatabaseConfig, logger: structlog.stdlib.BoundLogger):
        self.config = config
        self.engine = create_engine_from_config(config)
        self.session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        self.log = logger.bind(component="database")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get async database session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(Team))
        """
        async with self.session_maker() as session:
            yield session

    async def init_db(self) -> None:
        """
        Create all tables defined in SQLModel metadata.

        Existing tables are left untouched.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        self.log.info("database_schema_ready", url=self.config.safe_url())

    async def ping(self) -> None:
        """Readiness check. Raises StorageError when the database is unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            self.log.warning("database_ping_failed", error=str(e))
            raise StorageError("database unavailable") from e

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()
