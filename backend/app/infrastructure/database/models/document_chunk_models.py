"""SQLAlchemy ORM model for embedded document chunks."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB

from pgvector.sqlalchemy import Vector

from app.config import get_settings
from app.infrastructure.database.base import Base

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class DocumentChunkModel(Base):
    """One atomic, narrative or semantic chunk with its embedding.

    Category attributes are flat nullable columns; only those relevant to the
    chunk's subtype are set. ``chunk_type`` records whether the chunk came
    from dual extraction or the structural fallback.
    """

    __tablename__ = "document_chunks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(String(64), nullable=False, index=True)
    source_id = Column(String(64), nullable=False, index=True)
    document_category = Column(String(40), nullable=False)
    chunk_type = Column(String(20), nullable=False)  # "dual", "semantic"

    content = Column(Text, nullable=False)
    kind = Column(String(20), nullable=False)  # "atomic", "narrative", "semantic"
    subtype = Column(String(40), nullable=True)
    community_name = Column(String(255), nullable=False)
    char_count = Column(Integer, nullable=False)

    atomic_category = Column(String(30), nullable=True)
    campaign_focus = Column(JSONB, nullable=False, default=list)
    is_pet_related = Column(Boolean, nullable=True)
    offer_expiry = Column(String(40), nullable=True)
    floor_plan_bedrooms = Column(Integer, nullable=True)
    amenity_category = Column(String(20), nullable=True)
    location_type = Column(String(20), nullable=True)
    price_type = Column(String(20), nullable=True)

    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_document_chunks_kind_subtype", "kind", "subtype"),
        Index("idx_document_chunks_embedding_hnsw", embedding, postgresql_using="hnsw",
              postgresql_ops={"embedding": "vector_cosine_ops"}),
    )
