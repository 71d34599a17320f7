"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.services import (
    ChunkAssembler,
    ChunkPersistenceService,
    DocumentIngestionService,
    EmbeddingService,
    NarrativeChunkBuilder,
)
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import SQLAlchemyChunkRepository
from app.infrastructure.openrouter import OpenRouterEmbeddingProvider


def _build_chunk_assembler() -> ChunkAssembler:
    settings = get_settings()
    narrative_builder = NarrativeChunkBuilder(
        focus_overlap_threshold=settings.narrative_focus_split_threshold,
    )
    return ChunkAssembler(narrative_builder=narrative_builder)


async def get_chunk_preview_service() -> AsyncGenerator[DocumentIngestionService, None]:
    """Provides a DocumentIngestionService for chunk previews — no embedding, no database."""
    yield DocumentIngestionService(assembler=_build_chunk_assembler())


async def get_document_ingestion_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[DocumentIngestionService, None]:
    """Provides a DocumentIngestionService wired to OpenRouter embeddings and PostgreSQL."""
    settings = get_settings()
    provider = OpenRouterEmbeddingProvider(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        model=settings.embedding_model,
        model_dimensions=settings.embedding_dimensions,
        timeout_seconds=settings.embedding_timeout_seconds,
    )
    embedding_service = EmbeddingService(
        provider,
        batch_size=settings.embedding_batch_size,
        batch_delay_ms=settings.embedding_batch_delay_ms,
    )
    persistence_service = ChunkPersistenceService(
        SQLAlchemyChunkRepository(session),
        batch_size=settings.persistence_batch_size,
    )
    yield DocumentIngestionService(
        assembler=_build_chunk_assembler(),
        embedding_service=embedding_service,
        persistence_service=persistence_service,
    )
