"""Database connection and session management for SQLite using SQLAlchemy with async support."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import MEMORY_DATABASE, get_global_settings
from .models import Base

logger = structlog.get_logger(__name__)


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ships with foreign key enforcement off for every new connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Database connection and session manager."""

    def __init__(
        self, database_url: Optional[str] = None, pool_size: Optional[int] = None
    ):
        """Initialize database manager with async engine.

        :param database_url: SQLAlchemy URL; defaults to the configured file
        :param pool_size: Maximum pooled connections for file databases
        """
        settings = get_global_settings()
        self.database_url = database_url or settings.database_url
        pool_size = pool_size or settings.database_pool_size

        engine_kwargs: Dict[str, Any] = {"echo": settings.debug}
        if MEMORY_DATABASE not in self.database_url:
            # In-memory databases use a single static connection
            engine_kwargs.update(pool_size=pool_size, max_overflow=0)
            self._ensure_parent_dir()

        self.engine = create_async_engine(self.database_url, **engine_kwargs)
        event.listen(self.engine.sync_engine, "connect", _enable_foreign_keys)

        # Create async session factory
        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _ensure_parent_dir(self) -> None:
        path = self.database_url.split(":///", 1)[-1]
        Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    async def init(self) -> None:
        """Create all cache tables that do not exist yet."""
        # Register every table with Base.metadata
        from riftcache.features.matches import orm_models as _matches  # noqa: F401
        from riftcache.features.players import orm_models as _players  # noqa: F401
        from riftcache.features.ranks import orm_models as _ranks  # noqa: F401
        from riftcache.features.settings import orm_models as _settings  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized", url=self.database_url)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session with proper cleanup."""
        async with self.async_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()
