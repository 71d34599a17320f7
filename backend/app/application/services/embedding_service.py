"""Embedding service — turns assembled chunks into vectors, one batch at a time.

Batches are sent sequentially with a short pause between them to respect the
provider's rate limits. Vectors are matched back to chunks strictly by
position inside the batch, so a batch that returns a different number of
vectors than it was sent is a fatal error.
"""

import asyncio
import logging

from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.domain.entities.document_chunk import DocumentChunk
from app.domain.exceptions import EmbeddingBatchError, EmbeddingProviderError, IngestionCancelledError
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("EmbeddingService")

# ── Batching constants ──────────────────────────────────────────────
_DEFAULT_BATCH_SIZE = 50  # Max texts per embedding API call
_DEFAULT_BATCH_DELAY_MS = 100


class EmbeddingService:
    """Application service for generating chunk embeddings in fixed-size batches."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
        batch_delay_ms: int = _DEFAULT_BATCH_DELAY_MS,
    ):
        self._embedding_provider = embedding_provider
        self._batch_size = batch_size
        self._batch_delay = batch_delay_ms / 1000

    async def embed_chunks(
        self,
        chunks: list[DocumentChunk],
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> list[list[float]]:
        """Return one vector per chunk, in chunk order.

        Raises:
            EmbeddingBatchError: a batch failed or returned the wrong number of vectors.
            IngestionCancelledError: ``cancel_event`` was set between batches.
        """
        texts = [c.content for c in chunks]
        vectors: list[list[float]] = []
        batch_count = (len(texts) + self._batch_size - 1) // self._batch_size

        for batch_index, batch_start in enumerate(range(0, len(texts), self._batch_size)):
            if cancel_event is not None and cancel_event.is_set():
                raise IngestionCancelledError("embedding", stored_count=0, completed_batches=batch_index)
            if batch_index > 0 and self._batch_delay > 0:
                await asyncio.sleep(self._batch_delay)

            batch = texts[batch_start : batch_start + self._batch_size]
            try:
                batch_vectors = await self._embedding_provider.generate_embeddings(batch)
            except EmbeddingProviderError as exc:
                plog.step_error(PipelineStage.EMBEDDING, f"Batch {batch_index + 1}/{batch_count} failed", error=exc)
                raise EmbeddingBatchError(
                    batch_index, batch_index, exc.message, retryable=exc.retryable
                ) from exc

            if len(batch_vectors) != len(batch):
                message = f"sent {len(batch)} texts, received {len(batch_vectors)} vectors"
                plog.step_error(PipelineStage.EMBEDDING, f"Batch {batch_index + 1}/{batch_count}: {message}")
                raise EmbeddingBatchError(batch_index, batch_index, message)

            vectors.extend(batch_vectors)
            plog.detail(f"Embedded batch {batch_index + 1}/{batch_count}", size=len(batch))

        logger.debug("Generated %d embeddings in %d batches", len(vectors), batch_count)
        return vectors
