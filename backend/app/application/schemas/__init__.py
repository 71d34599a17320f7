from .document import (
    ChunkDocumentRequest,
    ChunkDocumentResponse,
    ChunkSchema,
    ChunkSizeStatsSchema,
    IngestDocumentRequest,
    IngestDocumentResponse,
)

__all__ = [
    "ChunkDocumentRequest",
    "ChunkDocumentResponse",
    "ChunkSchema",
    "ChunkSizeStatsSchema",
    "IngestDocumentRequest",
    "IngestDocumentResponse",
]
