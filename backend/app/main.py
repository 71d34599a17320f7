"""FastAPI application factory for the listing chunker."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine
from app.infrastructure.database.bootstrap import create_chunk_tables, ensure_database_exists
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and prepare the chunk store before serving requests."""
    settings = get_settings()
    setup_logging(settings)

    if not settings.openrouter_api_key.strip():
        logger.warning("OPENROUTER_API_KEY is not set; /documents/ingest will fail at the embedding step")

    await ensure_database_exists(settings.database_url)
    await create_chunk_tables(engine)
    logger.info(
        "%s %s ready (embedding model %s, %d dims)",
        settings.app_title,
        settings.app_version,
        settings.embedding_model,
        settings.embedding_dimensions,
    )

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application: CORS plus the versioned API router."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8020, reload=True)
