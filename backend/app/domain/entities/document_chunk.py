"""Domain entities for document chunks — atomic facts, narrative passages, and stored records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ChunkKind(str, Enum):
    """How a chunk was produced — determines the shape of its metadata."""

    ATOMIC = "atomic"
    NARRATIVE = "narrative"
    SEMANTIC = "semantic"  # structural fallback, no subtype/category fields


class AtomicSubtype(str, Enum):
    """Subtypes for short (8-90 char) ingredient facts."""

    AMENITY = "atomic_amenity"
    FEATURE = "atomic_feature"
    FLOOR_PLAN = "atomic_floor_plan"
    LIFESTYLE = "atomic_lifestyle"
    LOCATION = "atomic_location"
    SPECIAL = "atomic_special"
    URGENCY = "atomic_urgency"
    CALL_TO_ACTION = "atomic_cta"
    PRICE = "atomic_price"
    COMMUNITY = "atomic_community"


class NarrativeSubtype(str, Enum):
    """Subtypes for 400-800 char contextual passages."""

    AMENITIES = "narrative_amenities"
    LOCATION = "narrative_location"
    LIFESTYLE = "narrative_lifestyle"
    COMMUNITY = "narrative_community"


class AtomicCategory(str, Enum):
    """Ad-format ingredient bucket an atomic chunk belongs to."""

    AMENITY = "amenity"
    FEATURE = "feature"
    LOCATION = "location"
    PRICING = "pricing"
    LIFESTYLE = "lifestyle"
    AVAILABILITY = "availability"


class CampaignFocus(str, Enum):
    """Marketing angle a narrative chunk supports."""

    LUXURY = "luxury"
    LOCATION = "location"
    AMENITIES = "amenities"
    VALUE = "value"
    LIFESTYLE = "lifestyle"


class AmenityCategory(str, Enum):
    FITNESS = "fitness"
    SOCIAL = "social"
    CONVENIENCE = "convenience"
    OUTDOOR = "outdoor"


class LocationType(str, Enum):
    PROXIMITY = "proximity"
    NEIGHBORHOOD = "neighborhood"
    TRANSIT = "transit"


class PriceType(str, Enum):
    STARTING_AT = "starting_at"
    RANGE = "range"
    AVERAGE = "average"


@dataclass(frozen=True)
class AtomicAttributes:
    """Category-specific attributes derived when an atomic match is accepted."""

    is_pet_related: bool | None = None
    offer_expiry: str | None = None
    floor_plan_bedrooms: int | None = None
    amenity_category: AmenityCategory | None = None
    location_type: LocationType | None = None
    price_type: PriceType | None = None


@dataclass(frozen=True)
class DocumentChunk:
    """A single retrieval unit produced by the chunking engine.

    ``char_count`` is always derived from ``content`` and never accepted
    from the caller. Atomic chunks carry ``atomic_category`` plus the
    attributes relevant to their subtype; narrative chunks carry a
    non-empty ``campaign_focus``; semantic (fallback) chunks carry neither.
    """

    content: str
    kind: ChunkKind
    community_name: str
    subtype: AtomicSubtype | NarrativeSubtype | None = None
    atomic_category: AtomicCategory | None = None
    campaign_focus: tuple[CampaignFocus, ...] = ()
    attributes: AtomicAttributes = field(default_factory=AtomicAttributes)

    @property
    def char_count(self) -> int:
        return len(self.content)


@dataclass
class ChunkRecord:
    """A chunk enriched with its embedding and caller identifiers, ready for storage."""

    chunk: DocumentChunk
    embedding: list[float]
    client_id: str
    source_id: str
    document_category: str
    chunk_type: str  # "dual" or "semantic"
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ChunkSizeStats:
    """Observability summary over the content lengths of one chunk list."""

    count: int
    min_chars: int
    max_chars: int
    avg_chars: int

    @classmethod
    def from_chunks(cls, chunks: list[DocumentChunk]) -> "ChunkSizeStats":
        if not chunks:
            return cls(count=0, min_chars=0, max_chars=0, avg_chars=0)
        lengths = [c.char_count for c in chunks]
        return cls(
            count=len(lengths),
            min_chars=min(lengths),
            max_chars=max(lengths),
            avg_chars=round(sum(lengths) / len(lengths)),
        )
