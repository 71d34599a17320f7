"""Unit tests for placeholder detection and community name resolution."""

import pytest

from app.application.services.community_name_resolver import (
    UNKNOWN_COMMUNITY,
    extract_community_name,
    resolve_community_name,
)
from app.application.services.placeholder_filter import is_placeholder_text, remove_placeholder_chunks
from app.domain.entities import ChunkKind, DocumentChunk


# ── Placeholder text ──


@pytest.mark.parametrize(
    "text",
    [
        "Lorem ipsum dolor sit amet",
        "Duis aute irure dolor in reprehenderit",
        "Vivamus mauris placerat near the park",
    ],
)
def test_placeholder_text_is_detected(text: str):
    assert is_placeholder_text(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "Spacious homes with private balconies and a resort-style pool.",
        "Velit esse",
    ],
)
def test_real_copy_is_kept(text: str):
    assert is_placeholder_text(text) is False


def test_remove_placeholder_chunks_reports_count():
    real = DocumentChunk(content="Resort-style saltwater pool", kind=ChunkKind.ATOMIC, community_name="Elm")
    fake = DocumentChunk(content="Lorem ipsum dolor sit amet", kind=ChunkKind.SEMANTIC, community_name="Elm")

    kept, removed = remove_placeholder_chunks([fake, real, fake])

    assert kept == [real]
    assert removed == 2


# ── Community name ──


def test_provided_name_wins():
    assert resolve_community_name("  Parkview ", "Property Name: Maple Ridge") == "Parkview"


def test_blank_provided_name_is_ignored():
    assert resolve_community_name("   ", "Property Name: Maple Ridge\nUnits: 240") == "Maple Ridge"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Community/Business Name: Oak Hollow\nAddress: 12 Main St", "Oak Hollow"),
        ("CLIENT ONBOARDING INFORMATION FOR The Grove BASIC INFORMATION", "The Grove"),
        ("Welcome to Cedar Point Apartments, where every day feels easy.", "Cedar Point Apartments"),
        ("Life at Harbor View is calm and green.", "Life at Harbor View"),
    ],
)
def test_extract_community_name(text: str, expected: str):
    assert extract_community_name(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "great rooms for rent near the river",
        "Property Name: Address",
        "Business Name: Oak",
    ],
)
def test_unusable_names_are_rejected(text: str):
    assert extract_community_name(text) is None
    assert resolve_community_name(None, text) == UNKNOWN_COMMUNITY


def test_long_names_are_capped():
    name = extract_community_name("Community Name: " + "A" * 300)
    assert len(name) == 200
