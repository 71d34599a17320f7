"""Unit tests for the structural segmentation cascade."""

import pytest

from app.application.services import SegmentationService
from app.application.services.segmentation_service import (
    CHARACTER,
    LIST,
    PARAGRAPH,
    SECTION,
    SENTENCE,
    TABLE,
)

_COURTYARD = "The courtyard garden offers shaded seating for residents. "
_WING = "The east wing has sunny rooms with tall windows and quiet halls. "


def _paragraph(sentence: str, length: int) -> str:
    return (sentence * (length // len(sentence) + 1))[:length].strip()


@pytest.fixture
def service() -> SegmentationService:
    return SegmentationService()


def test_three_paragraphs_use_paragraph_strategy(service: SegmentationService):
    text = "\n\n".join(_paragraph(_WING, 200) for _ in range(3))

    result = service.segment(text)

    assert result.strategy == PARAGRAPH
    assert result.fallbacks == []
    assert len(result.chunks) == 1
    assert result.chunks[0].count("\n\n") == 2


def test_flattened_ocr_text_falls_back_to_sentences(service: SegmentationService):
    text = _paragraph(_COURTYARD, 3000)
    assert "\n" not in text

    result = service.segment(text)

    assert result.primary_strategy == PARAGRAPH
    assert result.strategy == SENTENCE
    assert len(result.chunks) >= 2
    assert all(len(c) <= 1500 for c in result.chunks)


def test_text_without_sentence_breaks_falls_back_to_characters(service: SegmentationService):
    text = "word " * 700

    result = service.segment(text)

    assert result.fallbacks == [SENTENCE, CHARACTER]
    assert result.strategy == CHARACTER
    assert len(result.chunks) >= 4
    assert all(100 <= len(c) <= 800 for c in result.chunks)


def test_headings_select_section_strategy(service: SegmentationService):
    text = "\n".join(
        [
            "## Amenities",
            _paragraph("Residents enjoy a heated pool and a quiet reading lounge. ", 180),
            "## Location",
            _paragraph("Downtown cafes and the river trail are a short walk away. ", 180),
            "## Notes",
            "Call ahead.",
        ]
    )

    result = service.segment(text)

    assert result.strategy == SECTION
    assert len(result.chunks) == 2
    assert result.chunks[0].startswith("## Amenities")
    assert result.chunks[1].startswith("## Location")


def test_list_items_select_list_strategy(service: SegmentationService):
    text = "\n".join(
        [
            "Highlights for the season ahead are below.",
            "- Resort-style pool with private cabanas and grills",
            "- Fitness center open around the clock for residents",
            "- Dog park with agility equipment and wash station",
        ]
    )

    result = service.segment(text)

    assert result.strategy == LIST
    assert len(result.chunks) == 1
    assert result.chunks[0].startswith("- Resort-style pool")


def _unit_row(i: int) -> str:
    return f"| Unit {100 + i} | {i % 3 + 1} Bed | {900 + i * 5} sq ft | ${1400 + i * 10} |"


def test_table_rows_select_table_strategy(service: SegmentationService):
    intro = (
        "Every floor plan below includes in-home laundry and a private balcony "
        "with views over the courtyard garden and pool."
    )
    outro = (
        "Rents shown are for twelve month leases and may change without notice "
        "so please call the leasing office for current availability."
    )
    rows = [_unit_row(i) for i in range(5)]
    text = "\n".join([intro, *rows, outro])

    result = service.segment(text)

    assert result.primary_strategy == TABLE
    assert result.strategy == TABLE
    assert result.fallbacks == []
    assert result.chunks == [intro, "\n".join(rows), outro]


def test_large_table_falls_back_to_characters(service: SegmentationService):
    text = "\n".join(_unit_row(i) for i in range(60))
    assert len(text) > 1500

    result = service.segment(text)

    assert result.primary_strategy == TABLE
    assert result.strategy == CHARACTER
    assert len(result.chunks) >= 2
    assert all(100 <= len(c) <= 1500 for c in result.chunks)


def test_post_processing_tidies_whitespace(service: SegmentationService):
    paragraph = _paragraph(_WING, 150)
    text = f"{paragraph}   \n\n\n\n{paragraph}\n\n{paragraph}"

    result = service.segment(text)

    assert all("\n\n\n" not in c for c in result.chunks)
    assert all(not line.endswith(" ") for c in result.chunks for line in c.split("\n"))


@pytest.mark.parametrize(
    "text",
    [
        _paragraph(_COURTYARD, 5000),
        "\n\n".join(_paragraph(_WING, 900) for _ in range(4)),
        "# Overview\n" + _paragraph(_COURTYARD, 4000),
        "x" * 2600,
    ],
)
def test_chunks_stay_within_size_bounds(service: SegmentationService, text: str):
    result = service.segment(text)

    assert result.chunks
    assert all(100 <= len(c) <= 1500 for c in result.chunks)


def test_oversized_section_is_split_with_custom_bounds():
    service = SegmentationService(min_chunk_size=10, max_chunk_size=200, target_chunk_size=100)
    text = "## Big Section\n" + "word " * 120

    result = service.segment(text)

    assert len(result.chunks) > 1
    assert all(len(c) <= 200 for c in result.chunks)


def test_empty_text_returns_empty_result(service: SegmentationService):
    result = service.segment("   \n  ")
    assert result.is_empty
