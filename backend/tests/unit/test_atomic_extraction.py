"""Unit tests for atomic component extraction and its pattern library."""

import re

import pytest

from app.application.services import AtomicExtractionService
from app.application.services.atomic_patterns import (
    CategoryMatcher,
    determine_amenity_category,
    determine_location_type,
    extract_expiry_date,
)
from app.application.services.community_name_resolver import UNKNOWN_COMMUNITY
from app.domain.entities import (
    AmenityCategory,
    AtomicAttributes,
    AtomicCategory,
    AtomicSubtype,
    ChunkKind,
    DocumentChunk,
    LocationType,
    PriceType,
)


@pytest.fixture
def extractor() -> AtomicExtractionService:
    return AtomicExtractionService()


def _by_content(chunks: list[DocumentChunk], content: str) -> DocumentChunk:
    matches = [c for c in chunks if c.content == content]
    assert matches, f"no chunk with content {content!r} in {[c.content for c in chunks]}"
    return matches[0]


def test_pool_and_price_range(extractor: AtomicExtractionService):
    text = "Enjoy our Resort-style saltwater pool all summer long. Rent ranges $1,200-$2,000/month for most units."

    chunks = extractor.extract(text, "Parkview")

    pool = _by_content(chunks, "Resort-style saltwater pool")
    assert pool.kind == ChunkKind.ATOMIC
    assert pool.subtype == AtomicSubtype.AMENITY
    assert pool.atomic_category == AtomicCategory.AMENITY
    assert pool.attributes.amenity_category == AmenityCategory.SOCIAL
    assert pool.attributes.is_pet_related is False

    price = _by_content(chunks, "$1,200-$2,000/month")
    assert price.subtype == AtomicSubtype.PRICE
    assert price.attributes.price_type == PriceType.RANGE


def test_price_types(extractor: AtomicExtractionService):
    chunks = extractor.extract("Homes starting at $1,350. Average rent is $1,450/month.", UNKNOWN_COMMUNITY)

    assert _by_content(chunks, "starting at $1,350").attributes.price_type == PriceType.STARTING_AT
    assert _by_content(chunks, "$1,450/month").attributes.price_type == PriceType.AVERAGE


def test_prices_without_thousands_separator_keep_every_digit(extractor: AtomicExtractionService):
    text = "Two-bedroom homes rent for $1200/month. Pricing starting at $1500 today. Lofts run $950-$1800/month."

    chunks = extractor.extract(text, "Parkview")

    assert _by_content(chunks, "$1200/month").attributes.price_type == PriceType.AVERAGE
    assert _by_content(chunks, "starting at $1500").attributes.price_type == PriceType.STARTING_AT
    assert _by_content(chunks, "Pricing starting at $1500").subtype == AtomicSubtype.PRICE
    assert _by_content(chunks, "$950-$1800/month").attributes.price_type == PriceType.RANGE
    prices = [c.content for c in chunks if c.subtype == AtomicSubtype.PRICE]
    assert not any(re.search(r"\$(?:120|150|180)\b", p) for p in prices)


def test_length_bounds_reject_short_matches(extractor: AtomicExtractionService):
    chunks = extractor.extract("Units from $950 and a dog run out back.", UNKNOWN_COMMUNITY)

    contents = [c.content for c in chunks]
    assert "$950" not in contents
    assert "dog run" not in contents
    assert all(8 <= len(c) <= 90 for c in contents)


def test_duplicates_are_removed_case_insensitively(extractor: AtomicExtractionService):
    chunks = extractor.extract("Covered parking for every home. We also offer COVERED PARKING for guests.", "Elm")

    parking = [c for c in chunks if c.content.lower() == "covered parking"]
    assert len(parking) == 1
    assert parking[0].content == "Covered parking"
    assert parking[0].attributes.amenity_category == AmenityCategory.CONVENIENCE


def test_pet_amenities(extractor: AtomicExtractionService):
    chunks = extractor.extract("We are Pet-friendly with a fenced Dog park.", UNKNOWN_COMMUNITY)

    for content in ("Pet-friendly", "Dog park"):
        chunk = _by_content(chunks, content)
        assert chunk.attributes.is_pet_related is True
        assert chunk.attributes.amenity_category == AmenityCategory.OUTDOOR


def test_location_types(extractor: AtomicExtractionService):
    text = "Only 5 minutes from downtown. Near the metro. A prime location for commuters."

    chunks = extractor.extract(text, UNKNOWN_COMMUNITY)

    assert _by_content(chunks, "5 minutes from downtown").attributes.location_type == LocationType.PROXIMITY
    assert _by_content(chunks, "Near the metro").attributes.location_type == LocationType.TRANSIT
    assert _by_content(chunks, "prime location").attributes.location_type == LocationType.NEIGHBORHOOD


def test_special_offer_expiry_from_trailing_clause(extractor: AtomicExtractionService):
    chunks = extractor.extract("One month free when you sign by July 31st, 2025.", UNKNOWN_COMMUNITY)

    special = _by_content(chunks, "One month free")
    assert special.subtype == AtomicSubtype.SPECIAL
    assert special.atomic_category == AtomicCategory.PRICING
    assert special.attributes.offer_expiry == "2025-07-31"


def test_urgency_with_numeric_date(extractor: AtomicExtractionService):
    chunks = extractor.extract("Limited-time offer ends 08/15/2025 so act fast.", UNKNOWN_COMMUNITY)

    urgency = _by_content(chunks, "offer ends 08/15/2025")
    assert urgency.subtype == AtomicSubtype.URGENCY
    assert urgency.attributes.offer_expiry == "2025-08-15"


def test_availability_phrases(extractor: AtomicExtractionService):
    chunks = extractor.extract("Now leasing! Homes available March 2026.", UNKNOWN_COMMUNITY)

    for content in ("Now leasing", "available March 2026"):
        chunk = _by_content(chunks, content)
        assert chunk.subtype == AtomicSubtype.SPECIAL
        assert chunk.atomic_category == AtomicCategory.AVAILABILITY


def test_floor_plans_count_bedrooms(extractor: AtomicExtractionService):
    chunks = extractor.extract("Spacious 2-bed, 2-bath layouts and Modern studio apartments.", UNKNOWN_COMMUNITY)

    assert _by_content(chunks, "Spacious 2-bed, 2-bath").attributes.floor_plan_bedrooms == 2
    studio = _by_content(chunks, "Modern studio apartments")
    assert studio.subtype == AtomicSubtype.FLOOR_PLAN
    assert studio.attributes.floor_plan_bedrooms == 0


def test_call_to_action(extractor: AtomicExtractionService):
    chunks = extractor.extract("Schedule your tour today and see the views.", UNKNOWN_COMMUNITY)

    assert _by_content(chunks, "Schedule your tour today").subtype == AtomicSubtype.CALL_TO_ACTION


def test_community_name_from_caller_and_generic_shape(extractor: AtomicExtractionService):
    chunks = extractor.extract("Say hello to The Parkview Apartments.", "Parkview")

    community = [c for c in chunks if c.subtype == AtomicSubtype.COMMUNITY]
    assert [c.content for c in community] == ["The Parkview Apartments"]
    assert community[0].community_name == "Parkview"


def test_placeholder_community_name_builds_no_name_pattern(extractor: AtomicExtractionService):
    chunks = extractor.extract("Residents love the unknown community garden.", UNKNOWN_COMMUNITY)

    assert not [c for c in chunks if c.subtype == AtomicSubtype.COMMUNITY]
    assert all(c.community_name == UNKNOWN_COMMUNITY for c in chunks)


def test_custom_library_entries_are_used():
    concierge = CategoryMatcher(
        subtype=AtomicSubtype.AMENITY,
        category=AtomicCategory.AMENITY,
        patterns=(re.compile(r"\bwhite-glove concierge\b", re.IGNORECASE),),
        derive=lambda match, trailing: AtomicAttributes(is_pet_related=False),
    )
    extractor = AtomicExtractionService(library={"concierge": concierge})

    chunks = extractor.extract("Every tower has White-glove concierge staff.", UNKNOWN_COMMUNITY)

    assert [c.content for c in chunks] == ["White-glove concierge"]


def test_extraction_is_deterministic(extractor: AtomicExtractionService):
    text = "Resort-style saltwater pool. Covered parking. Starting at $1,350. Schedule a tour today."
    assert extractor.extract(text, "Elm") == extractor.extract(text, "Elm")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Offer expires December 1, 2025", "2025-12-01"),
        ("valid through 1/5/2026", "2026-01-05"),
        ("ends Sept 3, 2025", "Sept 3, 2025"),
        ("no date here", None),
    ],
)
def test_extract_expiry_date(text: str, expected: str | None):
    assert extract_expiry_date(text) == expected


def test_classifier_defaults():
    assert determine_amenity_category("private balcony") == AmenityCategory.OUTDOOR
    assert determine_amenity_category("24-hour fitness center") == AmenityCategory.FITNESS
    assert determine_location_type("waterfront") == LocationType.NEIGHBORHOOD
