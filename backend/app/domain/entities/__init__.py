from .document_chunk import (
    AmenityCategory,
    AtomicAttributes,
    AtomicCategory,
    AtomicSubtype,
    CampaignFocus,
    ChunkKind,
    ChunkRecord,
    ChunkSizeStats,
    DocumentChunk,
    LocationType,
    NarrativeSubtype,
    PriceType,
)
from .document_structure import DocumentStructure, StructureElement
from .ingestion import (
    ChunkingMode,
    ChunkingOutcome,
    DocumentCategory,
    IngestionRequest,
    IngestionResult,
)

__all__ = [
    "AmenityCategory",
    "AtomicAttributes",
    "AtomicCategory",
    "AtomicSubtype",
    "CampaignFocus",
    "ChunkKind",
    "ChunkRecord",
    "ChunkSizeStats",
    "DocumentChunk",
    "LocationType",
    "NarrativeSubtype",
    "PriceType",
    "DocumentStructure",
    "StructureElement",
    "ChunkingMode",
    "ChunkingOutcome",
    "DocumentCategory",
    "IngestionRequest",
    "IngestionResult",
]
