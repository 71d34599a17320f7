"""Structural segmentation — picks one strategy from the document structure and falls back when it degenerates.

Selection order (the first whose structural tag has matches wins):
  1. section-based    (headings present)
  2. list-based       (list items present)
  3. table-based      (table rows present)
  4. paragraph-based  (default)

If the chosen strategy yields at most one chunk for a document larger than
the maximum chunk size, the cascade escalates through sentence-based and
then fixed-width character splitting. The final list is post-processed
(whitespace tidied, size bounds enforced) regardless of strategy.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import groupby

from app.application.services.structure_analyzer import StructureAnalyzer
from app.application.services.text_splitting import (
    normalize_text,
    pack,
    split_fixed_width,
    split_paragraphs,
    split_sentences,
    tidy_chunk,
)
from app.domain.entities.document_structure import DocumentStructure, StructureElement

# ── Size bounds ─────────────────────────────────────────────────────
_MIN_CHUNK_SIZE = 100
_MAX_CHUNK_SIZE = 1500
_TARGET_CHUNK_SIZE = 800

_MIN_LINE_LENGTH = 20  # lines at or below this length are ignored when regrouping
_SPARSE_PARAGRAPH_COUNT = 2  # this many paragraphs or fewer means "no real breaks"

SECTION = "section"
LIST = "list"
TABLE = "table"
PARAGRAPH = "paragraph"
SENTENCE = "sentence"
CHARACTER = "character"


@dataclass
class StrategyOutcome:
    """Raw output of one strategy before post-processing."""

    strategy: str
    chunks: list[str]
    is_degenerate: bool


@dataclass
class SegmentationResult:
    """Final structural chunks plus a trace of how they were produced."""

    chunks: list[str]
    strategy: str
    primary_strategy: str
    structure: DocumentStructure
    fallbacks: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.chunks


class SegmentationService:
    """Runs the structure-driven strategy cascade over one document."""

    def __init__(
        self,
        analyzer: StructureAnalyzer | None = None,
        *,
        min_chunk_size: int = _MIN_CHUNK_SIZE,
        max_chunk_size: int = _MAX_CHUNK_SIZE,
        target_chunk_size: int = _TARGET_CHUNK_SIZE,
    ):
        self._analyzer = analyzer or StructureAnalyzer()
        self._min = min_chunk_size
        self._max = max_chunk_size
        self._target = target_chunk_size

    def segment(self, text: str) -> SegmentationResult:
        """Split ``text`` into structural chunks within the configured size bounds."""
        clean = normalize_text(text)
        structure = self._analyzer.analyze(clean) if clean else DocumentStructure()
        if not clean:
            return SegmentationResult([], PARAGRAPH, PARAGRAPH, structure)

        lines = clean.split("\n")
        primary_name, primary = self._select_strategy(structure)
        outcome = self._outcome(primary_name, primary(clean, lines, structure), clean)

        fallbacks: list[str] = []
        for name, fallback in ((SENTENCE, self._sentence_chunks), (CHARACTER, self._character_chunks)):
            if not outcome.is_degenerate:
                break
            fallbacks.append(name)
            outcome = self._outcome(name, fallback(clean), clean)

        return SegmentationResult(
            chunks=self._post_process(outcome.chunks),
            strategy=outcome.strategy,
            primary_strategy=primary_name,
            structure=structure,
            fallbacks=fallbacks,
        )

    # ── Strategy selection ──────────────────────────────────────────

    def _select_strategy(
        self, structure: DocumentStructure
    ) -> tuple[str, Callable[[str, list[str], DocumentStructure], list[str]]]:
        candidates = (
            (SECTION, structure.headings, self._section_chunks),
            (LIST, structure.list_items, self._list_chunks),
            (TABLE, structure.table_rows, self._table_chunks),
        )
        for name, tagged, strategy in candidates:
            if tagged:
                return name, strategy
        return PARAGRAPH, self._paragraph_chunks

    def _outcome(self, strategy: str, chunks: list[str], text: str) -> StrategyOutcome:
        degenerate = len(chunks) <= 1 and len(text) > self._max
        return StrategyOutcome(strategy=strategy, chunks=chunks, is_degenerate=degenerate)

    # ── Primary strategies ──────────────────────────────────────────

    def _section_chunks(self, text: str, lines: list[str], structure: DocumentStructure) -> list[str]:
        headings = sorted(structure.headings, key=lambda h: h.line_index)
        chunks: list[str] = []

        preamble = "\n".join(lines[: headings[0].line_index]).strip()
        if len(preamble) >= self._min:
            chunks.append(preamble)

        for current, following in zip(headings, [*headings[1:], None]):
            end = following.line_index if following else len(lines)
            section = "\n".join(lines[current.line_index : end]).strip()
            if len(section) < self._min:
                continue
            if len(section) > self._max:
                chunks.extend(self._split_large_section(section))
            else:
                chunks.append(section)
        return chunks

    def _list_chunks(self, text: str, lines: list[str], structure: DocumentStructure) -> list[str]:
        return self._partition_runs(lines, structure.list_items)

    def _table_chunks(self, text: str, lines: list[str], structure: DocumentStructure) -> list[str]:
        return self._partition_runs(lines, structure.table_rows)

    def _paragraph_chunks(self, text: str, lines: list[str], structure: DocumentStructure) -> list[str]:
        paragraphs = split_paragraphs(text)
        if len(paragraphs) <= _SPARSE_PARAGRAPH_COUNT:
            # Flattened (OCR/PDF) text: regroup individual lines up to the target size
            meaningful = [line.strip() for line in lines if len(line.strip()) > _MIN_LINE_LENGTH]
            paragraphs = pack(meaningful, self._target, separator="\n", min_size=self._min)
        return pack(paragraphs, self._max, min_size=self._min)

    # ── Fallback strategies ─────────────────────────────────────────

    def _sentence_chunks(self, text: str) -> list[str]:
        return pack(split_sentences(text), self._max, separator=" ", min_size=self._min)

    def _character_chunks(self, text: str) -> list[str]:
        return split_fixed_width(text, self._target, min_size=self._min)

    # ── Helpers ─────────────────────────────────────────────────────

    def _partition_runs(self, lines: list[str], tagged: list[StructureElement]) -> list[str]:
        """Group contiguous tagged / untagged lines; keep runs that meet the minimum size."""
        tagged_indices = {element.line_index for element in tagged}
        chunks: list[str] = []
        for _, run in groupby(enumerate(lines), key=lambda item: item[0] in tagged_indices):
            chunk = "\n".join(line for _, line in run).strip()
            if len(chunk) >= self._min:
                chunks.append(chunk)
        return chunks

    def _split_large_section(self, section: str) -> list[str]:
        paragraphs = split_paragraphs(section)
        if len(paragraphs) > 1:
            return pack(paragraphs, self._max)
        pieces = self._sentence_chunks(section)
        if len(pieces) <= 1:
            pieces = self._character_chunks(section)
        return pieces

    def _post_process(self, chunks: list[str]) -> list[str]:
        processed: list[str] = []
        for chunk in chunks:
            chunk = tidy_chunk(chunk)
            if len(chunk) > self._max:
                processed.extend(split_fixed_width(chunk, self._target, min_size=self._min))
            elif len(chunk) >= self._min:
                processed.append(chunk)
        return processed
