"""Unit tests for the ChunkAssembler — dual output, fallback, placeholder filtering."""

import pytest

from app.application.services import ChunkAssembler
from app.domain.entities import ChunkingMode, ChunkKind, DocumentCategory

_POOL = "The heated pool and the fitness studio stay open late for every resident. "
_DOWNTOWN = "Shops and cafes downtown are a short stroll from the front gate. "
_WING = "The east wing has sunny rooms with tall windows and quiet halls. "
_LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. "
)

BROCHURE = "\n\n".join(
    [(_POOL * 6).strip(), (_DOWNTOWN * 3).strip(), (_DOWNTOWN * 3).strip(), (_DOWNTOWN * 3).strip()]
)


class ExplodingExtractor:
    def extract(self, text: str, community_name: str):
        raise RuntimeError("pattern table corrupted")


class ExplodingBuilder:
    def build(self, text: str, community_name: str):
        raise ValueError("segment overflow")


@pytest.fixture
def assembler() -> ChunkAssembler:
    return ChunkAssembler()


def test_dual_output_lists_atomic_before_narrative(assembler: ChunkAssembler):
    outcome = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)

    assert outcome.mode == ChunkingMode.DUAL
    assert outcome.fallback_reason is None
    kinds = [c.kind for c in outcome.chunks]
    assert kinds == [ChunkKind.ATOMIC, ChunkKind.NARRATIVE, ChunkKind.NARRATIVE]
    assert outcome.chunks[0].content == "heated pool"
    assert all(c.community_name == "Parkview" for c in outcome.chunks)


def test_atomic_failure_falls_back_to_structural(assembler: ChunkAssembler):
    assembler = ChunkAssembler(atomic_extractor=ExplodingExtractor())

    outcome = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.MULTIFAMILY_PROPERTY)

    assert outcome.mode == ChunkingMode.SEMANTIC
    assert "atomic" in outcome.fallback_reason
    assert "pattern table corrupted" in outcome.fallback_reason
    assert outcome.strategy == "paragraph"
    assert outcome.chunks
    assert all(c.kind == ChunkKind.SEMANTIC for c in outcome.chunks)
    assert all(c.subtype is None and c.campaign_focus == () for c in outcome.chunks)


def test_narrative_failure_discards_atomic_output():
    assembler = ChunkAssembler(narrative_builder=ExplodingBuilder())

    outcome = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)

    assert outcome.mode == ChunkingMode.SEMANTIC
    assert "narrative" in outcome.fallback_reason
    assert not [c for c in outcome.chunks if c.kind == ChunkKind.ATOMIC]


def test_empty_dual_output_falls_back(assembler: ChunkAssembler):
    text = (_WING * 2).strip()

    outcome = assembler.assemble(text, "Elm Court", DocumentCategory.LOOKER_REPORT)

    assert outcome.mode == ChunkingMode.SEMANTIC
    assert outcome.fallback_reason == "empty dual output"
    assert [c.content for c in outcome.chunks] == [text]
    assert outcome.document_category == DocumentCategory.LOOKER_REPORT


def test_placeholder_chunks_are_removed(assembler: ChunkAssembler):
    lorem = (_LOREM * 4).strip()
    text = "\n\n".join([lorem, lorem, "Residents enjoy the Resort-style saltwater pool all year."])

    outcome = assembler.assemble(text, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)

    assert outcome.mode == ChunkingMode.DUAL
    assert outcome.removed_placeholders == 2
    assert [c.content for c in outcome.chunks] == ["Resort-style saltwater pool"]


def test_stats_reflect_the_final_list(assembler: ChunkAssembler):
    outcome = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)

    stats = outcome.stats
    assert stats.count == len(outcome.chunks)
    assert stats.min_chars == len("heated pool")
    assert stats.max_chars == max(c.char_count for c in outcome.chunks)


def test_assembly_is_deterministic(assembler: ChunkAssembler):
    first = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)
    second = assembler.assemble(BROCHURE, "Parkview", DocumentCategory.CLIENT_BRAND_ASSET)
    assert first == second
