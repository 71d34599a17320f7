"""Abstract repository interface (port) for embedded chunk records."""

from abc import ABC, abstractmethod

from app.domain.entities.document_chunk import ChunkRecord


class ChunkRepository(ABC):
    """Port for chunk record persistence."""

    @abstractmethod
    async def store_chunks(self, records: list[ChunkRecord]) -> int:
        """Durably write one batch of chunk records.

        The batch is committed as a unit: when this returns, every record in
        it is stored. Returns the number of records written.
        """
        ...
