from .chunk_repository import SQLAlchemyChunkRepository

__all__ = [
    "SQLAlchemyChunkRepository",
]
