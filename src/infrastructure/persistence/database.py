from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.orm import DeclarativeBase

from src.infrastructure.config.settings import get_settings

settings = get_settings()

CommitCallback = Callable[[], Awaitable[Any]]
_COMMIT_CALLBACKS_KEY = "commit_callbacks"


def _engine_options() -> dict:
    # SQLite (tests, local dev) has no connection pool sizing
    if settings.is_sqlite:
        return {}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_recycle": 3600,
        "connect_args": (
            {
                "server_settings": {"jit": "off"},
                "command_timeout": 60,
            }
            if "postgresql" in settings.database_url
            else {}
        ),
    }


# Create engine once at module level (not with lru_cache)
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
    **_engine_options(),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


# Modern SQLAlchemy 2.0 pattern
class Base(DeclarativeBase):
    """Base class for all database models"""

    pass


async def get_db():
    """
    Database session dependency for read operations.
    Does not commit - read-only operations don't need commits.
    Write operations should use get_db_transactional().
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_db_transactional():
    """
    Database session dependency for write operations with automatic transaction management.
    - Begins transaction automatically
    - Commits on success
    - Rolls back on exception
    - Runs on_commit callbacks once the commit has landed
    - Closes session automatically

    Use this for POST, PUT, PATCH, DELETE endpoints. Grant/audit pairs and
    permission-set replacements run in savepoints inside this transaction.
    """
    async with AsyncSessionLocal() as session:
        try:
            async with session.begin():
                yield session
        except Exception:
            session.info.pop(_COMMIT_CALLBACKS_KEY, None)
            await session.rollback()
            raise
        await run_commit_callbacks(session)


def on_commit(session: AsyncSession, callback: CommitCallback) -> None:
    """
    Queue an async callback to run after the session's transaction commits.

    Callbacks are dropped when the transaction rolls back.
    """
    session.info.setdefault(_COMMIT_CALLBACKS_KEY, []).append(callback)


async def run_commit_callbacks(session: AsyncSession) -> None:
    """Await and clear the callbacks queued with on_commit, in order"""
    callbacks = session.info.pop(_COMMIT_CALLBACKS_KEY, [])
    for callback in callbacks:
        await callback()
