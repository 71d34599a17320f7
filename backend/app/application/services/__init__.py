from .atomic_extraction_service import AtomicExtractionService
from .chunk_assembler import ChunkAssembler
from .chunk_persistence_service import ChunkPersistenceService
from .document_ingestion_service import DocumentIngestionService
from .embedding_service import EmbeddingService
from .narrative_chunk_builder import NarrativeChunkBuilder
from .segmentation_service import SegmentationService
from .structure_analyzer import StructureAnalyzer

__all__ = [
    "AtomicExtractionService",
    "ChunkAssembler",
    "ChunkPersistenceService",
    "DocumentIngestionService",
    "EmbeddingService",
    "NarrativeChunkBuilder",
    "SegmentationService",
    "StructureAnalyzer",
]
