"""Pydantic DTOs (Data Transfer Objects) for document chunking and ingestion."""

from pydantic import BaseModel, Field, field_validator

from app.domain.entities.document_chunk import DocumentChunk
from app.domain.entities.ingestion import ChunkingOutcome, DocumentCategory, IngestionResult


class ChunkDocumentRequest(BaseModel):
    """Schema for chunking a document without storing it."""

    raw_text: str = Field(..., min_length=1, examples=["Resort-style saltwater pool. Rent from $1,200/month."])
    community_name: str | None = Field(None, max_length=255, examples=["Parkview Apartments"])
    document_category: DocumentCategory = DocumentCategory.CLIENT_BRAND_ASSET

    @field_validator("raw_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("raw_text must not be blank")
        return value


class IngestDocumentRequest(ChunkDocumentRequest):
    """Schema for the full chunk → embed → store pipeline."""

    client_id: str = Field(..., min_length=1, max_length=64)
    source_id: str = Field(..., min_length=1, max_length=64)


class ChunkSchema(BaseModel):
    """One chunk as returned to the client, with category attributes flattened."""

    content: str
    kind: str
    subtype: str | None = None
    community_name: str
    char_count: int
    atomic_category: str | None = None
    campaign_focus: list[str] = Field(default_factory=list)
    is_pet_related: bool | None = None
    offer_expiry: str | None = None
    floor_plan_bedrooms: int | None = None
    amenity_category: str | None = None
    location_type: str | None = None
    price_type: str | None = None

    @classmethod
    def from_entity(cls, chunk: DocumentChunk) -> "ChunkSchema":
        attributes = chunk.attributes
        return cls(
            content=chunk.content,
            kind=chunk.kind.value,
            subtype=chunk.subtype.value if chunk.subtype else None,
            community_name=chunk.community_name,
            char_count=chunk.char_count,
            atomic_category=chunk.atomic_category.value if chunk.atomic_category else None,
            campaign_focus=[f.value for f in chunk.campaign_focus],
            is_pet_related=attributes.is_pet_related,
            offer_expiry=attributes.offer_expiry,
            floor_plan_bedrooms=attributes.floor_plan_bedrooms,
            amenity_category=attributes.amenity_category.value if attributes.amenity_category else None,
            location_type=attributes.location_type.value if attributes.location_type else None,
            price_type=attributes.price_type.value if attributes.price_type else None,
        )


class ChunkSizeStatsSchema(BaseModel):
    count: int
    min_chars: int
    max_chars: int
    avg_chars: int

    model_config = {"from_attributes": True}


class ChunkDocumentResponse(BaseModel):
    """Chunk list plus how it was produced."""

    community_name: str
    document_category: str
    mode: str  # "dual" or "semantic"
    strategy: str | None = None
    fallback_reason: str | None = None
    removed_placeholders: int = 0
    stats: ChunkSizeStatsSchema
    chunks: list[ChunkSchema]

    @classmethod
    def from_outcome(cls, outcome: ChunkingOutcome) -> "ChunkDocumentResponse":
        return cls(
            community_name=outcome.community_name,
            document_category=outcome.document_category.value,
            mode=outcome.mode.value,
            strategy=outcome.strategy,
            fallback_reason=outcome.fallback_reason,
            removed_placeholders=outcome.removed_placeholders,
            stats=ChunkSizeStatsSchema.model_validate(outcome.stats),
            chunks=[ChunkSchema.from_entity(c) for c in outcome.chunks],
        )


class IngestDocumentResponse(BaseModel):
    """Summary of a completed ingestion run."""

    community_name: str
    document_category: str
    mode: str
    strategy: str | None = None
    chunks_created: int
    chunks_stored: int
    duration_ms: int
    stats: ChunkSizeStatsSchema

    @classmethod
    def from_result(cls, result: IngestionResult) -> "IngestDocumentResponse":
        outcome = result.outcome
        return cls(
            community_name=outcome.community_name,
            document_category=outcome.document_category.value,
            mode=outcome.mode.value,
            strategy=outcome.strategy,
            chunks_created=len(outcome.chunks),
            chunks_stored=result.chunks_stored,
            duration_ms=result.duration_ms,
            stats=ChunkSizeStatsSchema.model_validate(outcome.stats),
        )
