"""Database configuration and session management."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import Settings
from .models.base import Base


class Database:
    """Explicit store handle owning the async engine and session factory.

    One instance is created per application (see ``main.create_app``) and kept
    on ``app.state.database``; nothing in the package holds a global engine.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            **engine_kwargs,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a store handle from application settings.

        Args:
            settings: Application settings

        Returns:
            Database bound to ``settings.database_url``
        """
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
        if not settings.is_sqlite:
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow
        return cls(settings.database_url, echo=settings.debug, **engine_kwargs)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def init(self) -> None:
        """Initialize database tables.

        Creates all tables defined in the models if they don't exist.
        Should be called during application startup.
        """
        async with self.engine.begin() as conn:
            # Import all models to ensure they are registered
            from .models import Job  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose the engine and close all pooled connections."""
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency to get a database session.

    Yields:
        AsyncSession: Session from the application's store handle

    Example:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
