from .embedding_provider import EmbeddingProvider
from .chunk_repository import ChunkRepository

__all__ = [
    "EmbeddingProvider",
    "ChunkRepository",
]
