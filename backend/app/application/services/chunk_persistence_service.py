"""Chunk persistence — writes embedded chunk records in fixed-size batches.

Each batch is committed by the repository before the next is sent. A failed
batch stops the run; batches already committed stay stored and their count
is reported on the raised error.
"""

import asyncio

from app.application.interfaces.chunk_repository import ChunkRepository
from app.domain.entities.document_chunk import ChunkRecord
from app.domain.exceptions import IngestionCancelledError, PersistenceBatchError
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

plog = PipelineLogger("ChunkPersistenceService")

_DEFAULT_BATCH_SIZE = 25


class ChunkPersistenceService:
    def __init__(self, chunk_repository: ChunkRepository, *, batch_size: int = _DEFAULT_BATCH_SIZE):
        self._chunk_repo = chunk_repository
        self._batch_size = batch_size

    async def store(
        self,
        records: list[ChunkRecord],
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> int:
        """Store ``records`` batch by batch and return how many were written."""
        stored = 0
        for batch_index, batch_start in enumerate(range(0, len(records), self._batch_size)):
            if cancel_event is not None and cancel_event.is_set():
                raise IngestionCancelledError("persistence", stored_count=stored, completed_batches=batch_index)

            batch = records[batch_start : batch_start + self._batch_size]
            try:
                stored += await self._chunk_repo.store_chunks(batch)
            except Exception as exc:
                plog.step_error(
                    PipelineStage.PERSISTENCE,
                    f"Batch {batch_index + 1} failed after {stored} chunks stored",
                    error=exc,
                )
                raise PersistenceBatchError(batch_index, stored, str(exc)) from exc
            plog.detail(f"Stored batch {batch_index + 1}", size=len(batch), total=stored)
        return stored
