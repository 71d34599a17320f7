"""SQLAlchemy implementation of ChunkRepository — stores chunk records with pgvector embeddings."""

import logging
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.chunk_repository import ChunkRepository
from app.domain.entities.document_chunk import ChunkRecord
from app.infrastructure.database.models.document_chunk_models import DocumentChunkModel

logger = logging.getLogger(__name__)


def _value(member: Enum | None) -> str | None:
    return member.value if member is not None else None


class SQLAlchemyChunkRepository(ChunkRepository):
    """Concrete chunk repository backed by PostgreSQL + pgvector.

    Every call is committed before it returns, so batches written earlier in
    a run stay stored when a later batch fails.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_model(self, record: ChunkRecord) -> DocumentChunkModel:
        """Map domain record → ORM model."""
        chunk = record.chunk
        attributes = chunk.attributes
        return DocumentChunkModel(
            client_id=record.client_id,
            source_id=record.source_id,
            document_category=record.document_category,
            chunk_type=record.chunk_type,
            content=chunk.content,
            kind=chunk.kind.value,
            subtype=_value(chunk.subtype),
            community_name=chunk.community_name,
            char_count=chunk.char_count,
            atomic_category=_value(chunk.atomic_category),
            campaign_focus=[f.value for f in chunk.campaign_focus],
            is_pet_related=attributes.is_pet_related,
            offer_expiry=attributes.offer_expiry,
            floor_plan_bedrooms=attributes.floor_plan_bedrooms,
            amenity_category=_value(attributes.amenity_category),
            location_type=_value(attributes.location_type),
            price_type=_value(attributes.price_type),
            embedding=record.embedding,
            created_at=record.created_at,
        )

    async def store_chunks(self, records: list[ChunkRecord]) -> int:
        """Persist and commit one batch of chunk records."""
        if not records:
            return 0

        models = [self._to_model(record) for record in records]
        self._session.add_all(models)
        try:
            await self._session.flush()
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        for record, model in zip(records, models, strict=True):
            record.id = model.id
        logger.info("Stored %d chunks for source %s", len(models), records[0].source_id)
        return len(models)
