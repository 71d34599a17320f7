"""Async engine and per-request sessions for the PostgreSQL chunk store.

SQL statement logging is governed by the ``log_level_sql`` category
rather than the engine's own ``echo`` flag.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import get_settings

_ASYNC_DRIVER = "postgresql+asyncpg"
_SYNC_DRIVERS = frozenset({"postgresql", "postgres", "postgresql+psycopg2"})


def async_database_url(database_url: str) -> URL:
    """Parse ``database_url`` and switch plain PostgreSQL URLs to the asyncpg driver."""
    url = make_url(database_url)
    if url.drivername in _SYNC_DRIVERS:
        url = url.set(drivername=_ASYNC_DRIVER)
    return url


engine = create_async_engine(
    async_database_url(get_settings().database_url),
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency — one session per request, rolled back if the request fails.

    The chunk repository commits each persistence batch itself; the final
    commit here only flushes anything left pending.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
