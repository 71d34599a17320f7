"""Unified chunk assembler — atomic + narrative chunks, with a structural fallback.

Flow:
  1. Run atomic extraction and narrative building on the same text
  2. Concatenate (atomic first, narrative second — no reordering)
  3. If either extractor raises, or both yield nothing, discard the dual
     output and segment the raw text structurally instead
  4. Drop Latin placeholder chunks from whichever list was produced

This is the only component that catches extraction failures. All chunking
helpers are pure and silent; the assembler emits one log event per stage.
"""

from collections.abc import Callable

from app.application.services.atomic_extraction_service import AtomicExtractionService
from app.application.services.narrative_chunk_builder import NarrativeChunkBuilder
from app.application.services.placeholder_filter import remove_placeholder_chunks
from app.application.services.segmentation_service import SegmentationService
from app.domain.entities.document_chunk import ChunkKind, DocumentChunk
from app.domain.entities.ingestion import ChunkingMode, ChunkingOutcome, DocumentCategory
from app.domain.exceptions import ExtractionError
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

plog = PipelineLogger("ChunkAssembler")


class ChunkAssembler:
    """Produces the final ordered chunk list for one document."""

    def __init__(
        self,
        atomic_extractor: AtomicExtractionService | None = None,
        narrative_builder: NarrativeChunkBuilder | None = None,
        segmenter: SegmentationService | None = None,
    ):
        self._atomic = atomic_extractor or AtomicExtractionService()
        self._narrative = narrative_builder or NarrativeChunkBuilder()
        self._segmenter = segmenter or SegmentationService()

    def assemble(
        self,
        text: str,
        community_name: str,
        document_category: DocumentCategory,
    ) -> ChunkingOutcome:
        """Chunk ``text`` for ``community_name``; never raises on extractor failure."""
        try:
            atomic = self._extract("atomic", self._atomic.extract, text, community_name)
            plog.step_complete(PipelineStage.ATOMIC, f"Extracted {len(atomic)} atomic chunks")
            narrative = self._extract("narrative", self._narrative.build, text, community_name)
            plog.step_complete(PipelineStage.NARRATIVE, f"Built {len(narrative)} narrative chunks")
        except ExtractionError as exc:
            plog.step_error(PipelineStage.FALLBACK, "Dual extraction failed, using structural chunking", error=exc)
            return self._structural(text, community_name, document_category, reason=str(exc))

        chunks, removed = remove_placeholder_chunks([*atomic, *narrative])
        if not chunks:
            plog.step_warning(PipelineStage.FALLBACK, "Dual extraction produced no chunks, using structural chunking")
            return self._structural(text, community_name, document_category, reason="empty dual output")

        outcome = ChunkingOutcome(
            chunks=chunks,
            mode=ChunkingMode.DUAL,
            community_name=community_name,
            document_category=document_category,
            removed_placeholders=removed,
        )
        self._log_outcome(outcome)
        return outcome

    @staticmethod
    def _extract(
        name: str,
        extractor: Callable[[str, str], list[DocumentChunk]],
        text: str,
        community_name: str,
    ) -> list[DocumentChunk]:
        try:
            return extractor(text, community_name)
        except Exception as exc:
            raise ExtractionError(name, exc) from exc

    def _structural(
        self,
        text: str,
        community_name: str,
        document_category: DocumentCategory,
        *,
        reason: str,
    ) -> ChunkingOutcome:
        result = self._segmenter.segment(text)
        plog.step_complete(
            PipelineStage.SEGMENTATION,
            f"Structural chunking produced {len(result.chunks)} chunks",
            strategy=result.strategy,
            fallbacks=",".join(result.fallbacks) or "none",
        )

        chunks = [
            DocumentChunk(content=content, kind=ChunkKind.SEMANTIC, community_name=community_name)
            for content in result.chunks
        ]
        chunks, removed = remove_placeholder_chunks(chunks)
        outcome = ChunkingOutcome(
            chunks=chunks,
            mode=ChunkingMode.SEMANTIC,
            community_name=community_name,
            document_category=document_category,
            strategy=result.strategy,
            fallbacks=result.fallbacks,
            fallback_reason=reason,
            removed_placeholders=removed,
        )
        if not chunks:
            plog.step_warning(PipelineStage.SEGMENTATION, "Structural chunking produced no usable chunks")
        self._log_outcome(outcome)
        return outcome

    @staticmethod
    def _log_outcome(outcome: ChunkingOutcome) -> None:
        stats = outcome.stats
        plog.step_complete(
            PipelineStage.ASSEMBLY,
            f"{stats.count} chunks assembled",
            mode=outcome.mode.value,
            community=outcome.community_name,
        )
        plog.stats(
            min_chars=stats.min_chars,
            max_chars=stats.max_chars,
            avg_chars=stats.avg_chars,
            placeholders_removed=outcome.removed_placeholders,
        )
