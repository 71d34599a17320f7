from .document_chunk_models import DocumentChunkModel

__all__ = [
    "DocumentChunkModel",
]
