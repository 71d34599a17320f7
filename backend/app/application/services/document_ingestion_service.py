"""Document ingestion — validate → chunk → embed → persist.

``chunk`` is the pure preview path (no I/O). ``ingest`` runs the full
pipeline and reports how many chunks were stored. Errors raised after
chunking carry the phase that failed and the partial progress made.
"""

import asyncio
import time

from app.application.services.chunk_assembler import ChunkAssembler
from app.application.services.chunk_persistence_service import ChunkPersistenceService
from app.application.services.community_name_resolver import resolve_community_name
from app.application.services.embedding_service import EmbeddingService
from app.domain.entities.document_chunk import ChunkRecord
from app.domain.entities.ingestion import (
    ChunkingOutcome,
    DocumentCategory,
    IngestionRequest,
    IngestionResult,
)
from app.domain.exceptions import EmptyChunkResultError, IngestionError, InputValidationError
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

plog = PipelineLogger("DocumentIngestionService")

_VALID_CATEGORIES = {c.value for c in DocumentCategory}


class DocumentIngestionService:
    """Orchestrates one document through the chunking engine and the storage boundary."""

    def __init__(
        self,
        assembler: ChunkAssembler,
        embedding_service: EmbeddingService | None = None,
        persistence_service: ChunkPersistenceService | None = None,
    ):
        self._assembler = assembler
        self._embedding = embedding_service
        self._persistence = persistence_service

    def chunk(self, request: IngestionRequest) -> ChunkingOutcome:
        """Validate the request and chunk its text without embedding or storing anything.

        Raises:
            InputValidationError: empty text or unknown document category.
            EmptyChunkResultError: every chunking path produced nothing.
        """
        category = self._validate(request)
        community_name = resolve_community_name(request.community_name, request.raw_text)
        plog.step_start(
            PipelineStage.STRUCTURE,
            "Chunking document",
            chars=len(request.raw_text),
            category=category.value,
            community=community_name,
        )

        outcome = self._assembler.assemble(request.raw_text, community_name, category)
        if not outcome.chunks:
            plog.step_error(PipelineStage.ERROR, f"No valid chunks created from {category.value} document")
            raise EmptyChunkResultError(category.value)
        return outcome

    async def ingest(
        self,
        request: IngestionRequest,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> IngestionResult:
        """Chunk, embed and store one document.

        Raises:
            InputValidationError, EmptyChunkResultError, EmbeddingBatchError,
            PersistenceBatchError, IngestionCancelledError
        """
        if self._embedding is None or self._persistence is None:
            raise RuntimeError("DocumentIngestionService was built without embedding/persistence services")
        for field_name in ("client_id", "source_id"):
            if not getattr(request, field_name).strip():
                raise InputValidationError(field_name, "must not be empty")

        start = time.monotonic()
        plog.separator("INGEST")
        outcome = self.chunk(request)

        try:
            with plog.timed_step(PipelineStage.EMBEDDING, f"Embedding {len(outcome.chunks)} chunks"):
                vectors = await self._embedding.embed_chunks(outcome.chunks, cancel_event=cancel_event)

            records = [
                ChunkRecord(
                    chunk=chunk,
                    embedding=vector,
                    client_id=request.client_id,
                    source_id=request.source_id,
                    document_category=outcome.document_category.value,
                    chunk_type=outcome.mode.value,
                )
                for chunk, vector in zip(outcome.chunks, vectors, strict=True)
            ]

            with plog.timed_step(PipelineStage.PERSISTENCE, f"Storing {len(records)} chunk records"):
                stored = await self._persistence.store(records, cancel_event=cancel_event)
        except IngestionError as exc:
            plog.step_error(PipelineStage.ERROR, f"Ingestion failed during {exc.phase}", error=exc)
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        plog.step_complete(
            PipelineStage.COMPLETE,
            f"Ingested {stored} chunks",
            mode=outcome.mode.value,
            duration_ms=duration_ms,
        )
        return IngestionResult(outcome=outcome, records=records, chunks_stored=stored, duration_ms=duration_ms)

    @staticmethod
    def _validate(request: IngestionRequest) -> DocumentCategory:
        if not request.raw_text or not request.raw_text.strip():
            raise InputValidationError("raw_text", "must not be empty")
        if request.document_category not in _VALID_CATEGORIES:
            allowed = ", ".join(sorted(_VALID_CATEGORIES))
            raise InputValidationError("document_category", f"must be one of: {allowed}")
        return DocumentCategory(request.document_category)
