"""Domain entities describing one document ingestion call and its outcome."""

from dataclasses import dataclass, field
from enum import Enum

from app.domain.entities.document_chunk import ChunkRecord, ChunkSizeStats, DocumentChunk


class DocumentCategory(str, Enum):
    """Kinds of client documents accepted for ingestion."""

    LOOKER_REPORT = "looker_report"
    CLIENT_BRAND_ASSET = "client_brand_asset"
    MULTIFAMILY_PROPERTY = "multifamily_property"


class ChunkingMode(str, Enum):
    """Which path of the assembler produced the chunk list."""

    DUAL = "dual"
    SEMANTIC = "semantic"


@dataclass
class IngestionRequest:
    """A single document handed to the engine.

    ``document_category`` is kept as a raw string here so the ingestion
    service can reject unknown values with a validation error.
    """

    raw_text: str
    document_category: str = DocumentCategory.CLIENT_BRAND_ASSET.value
    community_name: str | None = None
    client_id: str = ""
    source_id: str = ""


@dataclass
class ChunkingOutcome:
    """Pure result of chunking one document (no embeddings, nothing stored)."""

    chunks: list[DocumentChunk]
    mode: ChunkingMode
    community_name: str
    document_category: DocumentCategory
    strategy: str | None = None  # structural strategy, semantic mode only
    fallbacks: list[str] = field(default_factory=list)
    fallback_reason: str | None = None
    removed_placeholders: int = 0

    @property
    def stats(self) -> ChunkSizeStats:
        return ChunkSizeStats.from_chunks(self.chunks)


@dataclass
class IngestionResult:
    """Outcome of a full ingestion call: chunk → embed → persist."""

    outcome: ChunkingOutcome
    records: list[ChunkRecord]
    chunks_stored: int
    duration_ms: int = 0
