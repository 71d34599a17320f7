"""Startup preparation of the chunk store: database, pgvector extension, tables."""

import logging

import asyncpg
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from app.infrastructure.database.base import Base
from app.infrastructure.database.session import async_database_url

logger = logging.getLogger(__name__)

_MAINTENANCE_DATABASE = "postgres"


async def ensure_database_exists(database_url: str) -> bool:
    """Create the target database when missing; return True if it was created.

    Connects to the ``postgres`` maintenance database with asyncpg because
    ``CREATE DATABASE`` cannot run inside the transaction SQLAlchemy opens.
    Connection failures are logged and left for the engine to surface.
    """
    url = async_database_url(database_url)
    if not url.database:
        return False

    maintenance_dsn = url.set(drivername="postgresql", database=_MAINTENANCE_DATABASE).render_as_string(
        hide_password=False
    )
    try:
        conn = await asyncpg.connect(maintenance_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach maintenance database to check '%s': %s", url.database, exc)
        return False

    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", url.database)
        if exists:
            logger.debug("Database '%s' already exists", url.database)
            return False
        quoted = url.database.replace('"', '""')
        await conn.execute(f'CREATE DATABASE "{quoted}"')
        logger.info("Created database '%s'", url.database)
        return True
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", url.database, exc)
        return False
    finally:
        await conn.close()


async def create_chunk_tables(engine: AsyncEngine) -> None:
    """Enable pgvector, then create the ``document_chunks`` table and its indexes."""
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
