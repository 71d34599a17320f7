"""Pattern library for atomic components — one matcher per ingredient category.

Each ``CategoryMatcher`` pairs an ordered tuple of case-insensitive regular
expressions with a derivation function that computes category-specific
attributes from the matched text and the clause that trails it. Adding a
category means adding an entry to ``ATOMIC_PATTERN_LIBRARY``; the extractor
iterates the library uniformly.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.document_chunk import (
    AmenityCategory,
    AtomicAttributes,
    AtomicCategory,
    AtomicSubtype,
    LocationType,
    PriceType,
)

_I = re.IGNORECASE

_TRAILING_CONTEXT_CHARS = 80
_CLAUSE_END = re.compile(r"[.!?](?:\s|$)|\n")

_MONTH = (
    r"(?:january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec)\.?"
)
_MONTH_DATE = rf"{_MONTH}\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}"
_NUMERIC_DATE = r"\d{1,2}/\d{1,2}/\d{4}"
_FULL_MONTH = (
    r"(?:january|february|march|april|may|june|july|august|september|october|november|december)"
)
_DOLLARS = r"\$\d+(?:,\d{3})*(?:\.\d{2})?(?!\d)"

_EXPIRY_PATTERNS = (
    re.compile(rf"\b(?:expires?|ends?|through|until|by)\s+({_MONTH_DATE})", _I),
    re.compile(rf"\b(?:expires?|ends?|through|until|by)\s+({_NUMERIC_DATE})", _I),
)
_ORDINAL_SUFFIX = re.compile(r"(?<=\d)(?:st|nd|rd|th)\b", _I)
_DATE_FORMATS = ("%B %d %Y", "%b %d %Y", "%m/%d/%Y")

_PET_KEYWORDS = re.compile(r"\b(?:pet|dog|cat)s?\b", _I)

_FITNESS_KEYWORDS = re.compile(r"\b(?:gym|fitness|workout|exercise|yoga)", _I)
_SOCIAL_KEYWORDS = re.compile(r"\b(?:pool|clubhouse|lounge|game|social|media)", _I)
_CONVENIENCE_KEYWORDS = re.compile(
    r"\b(?:laundry|washer|dryer|parking|garage|storage|concierge|package|valet|doorman|business)", _I
)

_PROXIMITY_KEYWORDS = re.compile(r"\b(?:minutes?|drive|walk(?:ing)?|steps|blocks?)\b", _I)
_TRANSIT_KEYWORDS = re.compile(r"\b(?:metro|transit|bus|train|subway|rail)\b", _I)

_STARTING_AT_KEYWORDS = re.compile(r"\b(?:starting|from)\b|as\s+low\s+as", _I)
_RANGE_MARKERS = re.compile(r"-|\sto\s", _I)

_BEDROOM_COUNT = re.compile(r"\b(\d|one|two|three|four)[-\s]bed", _I)
_STUDIO = re.compile(r"\bstudio\b", _I)
_NUMBER_WORDS = {"one": 1, "two": 2, "three": 3, "four": 4}


@dataclass(frozen=True)
class AtomicMatch:
    """One accepted-or-not candidate produced by a category matcher."""

    content: str
    attributes: AtomicAttributes


Derivation = Callable[[str, str], AtomicAttributes]


def _no_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes()


@dataclass(frozen=True)
class CategoryMatcher:
    """A category's ordered pattern set plus its attribute derivation."""

    subtype: AtomicSubtype
    category: AtomicCategory
    patterns: tuple[re.Pattern[str], ...]
    derive: Derivation = _no_attributes

    def find(self, text: str) -> list[AtomicMatch]:
        """Scan ``text`` with every pattern, in pattern order then document order."""
        matches: list[AtomicMatch] = []
        for pattern in self.patterns:
            for found in pattern.finditer(text):
                content = found.group(0).strip()
                if not content:
                    continue
                trailing = _trailing_clause(text, found.end())
                matches.append(AtomicMatch(content, self.derive(content, trailing)))
        return matches


def _trailing_clause(text: str, position: int) -> str:
    window = text[position : position + _TRAILING_CONTEXT_CHARS]
    end = _CLAUSE_END.search(window)
    return window[: end.start()] if end else window


# ── Attribute derivations ───────────────────────────────────────────


def extract_expiry_date(text: str) -> str | None:
    """Find an expiry clause ("ends July 31st, 2025") and return it as an ISO date when parseable."""
    for pattern in _EXPIRY_PATTERNS:
        match = pattern.search(text)
        if match:
            return _to_iso_date(match.group(1))
    return None


def _to_iso_date(raw: str) -> str:
    cleaned = _ORDINAL_SUFFIX.sub("", raw).replace(",", " ").replace(".", " ")
    cleaned = " ".join(cleaned.split())
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue
    return raw.strip()


def determine_amenity_category(text: str) -> AmenityCategory:
    if _FITNESS_KEYWORDS.search(text):
        return AmenityCategory.FITNESS
    if _SOCIAL_KEYWORDS.search(text):
        return AmenityCategory.SOCIAL
    if _CONVENIENCE_KEYWORDS.search(text):
        return AmenityCategory.CONVENIENCE
    return AmenityCategory.OUTDOOR


def determine_location_type(text: str) -> LocationType:
    if _PROXIMITY_KEYWORDS.search(text):
        return LocationType.PROXIMITY
    if _TRANSIT_KEYWORDS.search(text):
        return LocationType.TRANSIT
    return LocationType.NEIGHBORHOOD


def determine_price_type(text: str) -> PriceType:
    if _STARTING_AT_KEYWORDS.search(text):
        return PriceType.STARTING_AT
    if _RANGE_MARKERS.search(text):
        return PriceType.RANGE
    return PriceType.AVERAGE


def count_bedrooms(text: str) -> int | None:
    if _STUDIO.search(text):
        return 0
    match = _BEDROOM_COUNT.search(text)
    if not match:
        return None
    token = match.group(1).lower()
    return int(token) if token.isdigit() else _NUMBER_WORDS[token]


def _amenity_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes(
        is_pet_related=bool(_PET_KEYWORDS.search(match)),
        amenity_category=determine_amenity_category(match),
    )


def _location_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes(location_type=determine_location_type(match))


def _price_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes(price_type=determine_price_type(match))


def _offer_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes(offer_expiry=extract_expiry_date(f"{match} {trailing}"))


def _floor_plan_attributes(match: str, trailing: str) -> AtomicAttributes:
    return AtomicAttributes(floor_plan_bedrooms=count_bedrooms(match))


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, _I) for p in patterns)


# ── The library ─────────────────────────────────────────────────────

ATOMIC_PATTERN_LIBRARY: dict[str, CategoryMatcher] = {
    "amenity": CategoryMatcher(
        subtype=AtomicSubtype.AMENITY,
        category=AtomicCategory.AMENITY,
        derive=_amenity_attributes,
        patterns=_compile(
            r"\b(?:(?:resort-style|luxury|heated|saltwater|infinity|rooftop|olympic-size|lap)\s+){1,3}pools?\b",
            r"\b(?:(?:state-of-the-art|24-hour|fully-equipped|modern)\s+){1,2}fitness\s+(?:center|gym)\b",
            r"\b(?:in-unit|full-size|stackable|front-loading)\s+(?:washers?(?:\s+and\s+dryers?)?|laundry)\b",
            r"\b(?:granite|quartz|stainless\s+steel|gourmet)\s+(?:countertops|appliances|kitchens?)\b",
            r"\b(?:walk-in|spacious|custom)\s+(?:closets?|pantry|pantries)\b",
            r"\b(?:private|covered|spacious|oversized)\s+(?:balcon(?:y|ies)|patios?)\b",
            r"\b(?:clubhouse|business\s+center|media\s+room|game\s+room)\b",
            r"\b(?:dog\s+park|pet\s+spa|pet-friendly|dog\s+run)\b",
            r"\b(?:concierge|doorman|valet|package)\s+services?\b",
            r"\b(?:garage|covered|assigned|reserved)\s+parking\b",
        ),
    ),
    "feature": CategoryMatcher(
        subtype=AtomicSubtype.FEATURE,
        category=AtomicCategory.FEATURE,
        patterns=_compile(
            r"\b(?:hardwood|luxury\s+vinyl(?:\s+plank)?|ceramic\s+tile)\s+(?:floors|flooring)\b",
            r"\b(?:central|zoned)\s+(?:air(?:\s+conditioning)?|a/c|heating)\b",
            r"\b(?:high|vaulted|cathedral|9-foot|10-foot)\s+ceilings\b",
            r"\b(?:crown|decorative)\s+molding\b",
            r"\b(?:energy-efficient|double-pane)\s+windows\b",
            r"\b(?:security|controlled\s+access|keyless)\s+(?:system|entry)\b",
            r"\b(?:smart|programmable)\s+thermostats?\b",
            r"\b(?:usb|built-in)\s+outlets\b",
        ),
    ),
    "floor_plan": CategoryMatcher(
        subtype=AtomicSubtype.FLOOR_PLAN,
        category=AtomicCategory.FEATURE,
        derive=_floor_plan_attributes,
        patterns=_compile(
            r"\b(?:(?:spacious|open-concept|luxury|modern)\s+)?(?:\d|one|two|three|four)[-\s]bed(?:room)?s?"
            r"(?:\s*(?:,|/|and|&)\s*(?:\d(?:\.5)?|one|two|three)[-\s]bath(?:room)?s?)?\b",
            r"\b(?:(?:spacious|luxury|modern)\s+)?studio\s+(?:apartments?|homes?|units?|floor\s+plans?)\b",
        ),
    ),
    "location": CategoryMatcher(
        subtype=AtomicSubtype.LOCATION,
        category=AtomicCategory.LOCATION,
        derive=_location_attributes,
        patterns=_compile(
            r"\b(?:\d+\s+minutes?(?:\s+(?:from|to))?|walking\s+distance(?:\s+(?:to|from|of))?"
            r"|steps\s+(?:from|to)|close\s+to|near|minutes\s+from)\s+(?:the\s+)?"
            r"(?:shopping|dining|entertainment|beach|downtown|metro|transit)\b",
            r"\b(?:convenient\s+access|easy\s+access|quick\s+drive)\s+to\s+[^.,;\n]{5,50}\b",
            r"\b(?:prime|desirable|prestigious)\s+(?:location|neighborhood|area)\b",
            r"\b(?:waterfront|beachfront|ocean\s+views?|mountain\s+views?)\b",
        ),
    ),
    "price": CategoryMatcher(
        subtype=AtomicSubtype.PRICE,
        category=AtomicCategory.PRICING,
        derive=_price_attributes,
        patterns=_compile(
            rf"{_DOLLARS}(?:\s*-\s*\$?\d+(?:,\d{{3}})*(?!\d))?"
            r"(?:\s*/\s*(?:monthly|month|mo)\b|\s+(?:per\s+month|monthly|a\s+month)\b)?",
            rf"\b(?:starting\s+at|from|as\s+low\s+as)\s+{_DOLLARS}(?:\s*/\s*(?:month|mo)\b)?",
            rf"\b(?:rent|pricing|rates)\s+(?:starting\s+at|from)\s+{_DOLLARS}",
        ),
    ),
    "special": CategoryMatcher(
        subtype=AtomicSubtype.SPECIAL,
        category=AtomicCategory.PRICING,
        derive=_offer_attributes,
        patterns=_compile(
            r"\b(?:one|1|first)\s+month(?:'s)?\s+(?:rent\s+)?free\b",
            r"(?:\$\d[\d,]*|\b\d+\s+(?:weeks?|months?))\s+(?:off|free|deposit|special)\b",
            r"\b(?:move-in|signing|lease|look-and-lease)\s+(?:special|incentive|bonus)(?:es|s)?\b",
            r"\b(?:waived|reduced|no)\s+(?:security\s+)?(?:deposits?|fees|application\s+fees?|admin\s+fees?)\b",
        ),
    ),
    "availability": CategoryMatcher(
        subtype=AtomicSubtype.SPECIAL,
        category=AtomicCategory.AVAILABILITY,
        derive=_offer_attributes,
        patterns=_compile(
            rf"\b(?:available|move-in\s+ready|lease\s+ready|ready\s+for\s+occupancy)\s+(?:in\s+)?{_FULL_MONTH}\s+\d{{4}}\b",
            r"\b(?:available|move-in\s+ready|lease\s+ready)\s+(?:in\s+)?\d{1,2}/\d{4}\b",
            r"\b(?:available|move-in\s+ready|lease\s+ready)\s+(?:on\s+)?\d{1,2}/\d{1,2}/\d{4}\b",
            rf"\b(?:coming\s+soon|opening|grand\s+opening)\s+(?:in\s+)?{_FULL_MONTH}\s+\d{{4}}\b",
            r"\b(?:now\s+leasing|pre-leasing|accepting\s+applications)\b",
            r"\b(?:immediate|instant)\s+(?:move-ins?|occupancy|availability)\b",
            rf"\b(?:lease\s+starts?|occupancy\s+begins?)\s+{_FULL_MONTH}\s+\d{{4}}\b",
        ),
    ),
    "urgency": CategoryMatcher(
        subtype=AtomicSubtype.URGENCY,
        category=AtomicCategory.AVAILABILITY,
        derive=_offer_attributes,
        patterns=_compile(
            rf"\b(?:offer|special|promotion|deal)s?\s+(?:ends|expires)\s+(?:{_MONTH_DATE}|{_NUMERIC_DATE})",
            r"\blimited[-\s]time\s+(?:offer|only|special)\b",
            r"\bonly\s+\d+\s+(?:units?|homes?|apartments?)\s+(?:left|remaining)\b",
            r"\bwhile\s+(?:they|supplies)\s+last\b",
            r"\bdon't\s+miss\s+out\b",
        ),
    ),
    "call_to_action": CategoryMatcher(
        subtype=AtomicSubtype.CALL_TO_ACTION,
        category=AtomicCategory.AVAILABILITY,
        patterns=_compile(
            r"\b(?:schedule|book)\s+(?:your|a)\s+(?:(?:private|self-guided|virtual)\s+)?tour(?:\s+today)?\b",
            r"\b(?:apply|call|visit|lease)\s+(?:online\s+)?(?:today|now)\b",
            r"\b(?:contact|call)\s+(?:us|our\s+leasing\s+(?:team|office))\s+(?:today|now)\b",
        ),
    ),
    "lifestyle": CategoryMatcher(
        subtype=AtomicSubtype.LIFESTYLE,
        category=AtomicCategory.LIFESTYLE,
        patterns=_compile(
            r"\b(?:luxury|resort-style|urban|modern|upscale|carefree|elevated|maintenance-free)\s+"
            r"(?:apartment\s+)?(?:living|lifestyle)\b",
        ),
    ),
}

# Property-name shapes: the name words must be capitalised, the suffix may be any case.
_COMMUNITY_SUFFIX = r"(?:apartments?|condos?|community|residences?|homes?)"
_GENERIC_COMMUNITY_PATTERNS = (
    re.compile(rf"\b(?:[Tt]he\s+)?[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+(?i:{_COMMUNITY_SUFFIX})\b"),
    re.compile(r"\bThe\s+[A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+){1,3}\b"),
)


def build_community_matcher(community_name: str | None) -> CategoryMatcher:
    """Build the community matcher, adding a name-specific pattern when a real name is known."""
    patterns: list[re.Pattern[str]] = []
    name = (community_name or "").strip()
    if name:
        patterns.append(
            re.compile(rf"(?:\bthe\s+)?(?<!\w){re.escape(name)}(?:\s+{_COMMUNITY_SUFFIX})?", _I)
        )
    patterns.extend(_GENERIC_COMMUNITY_PATTERNS)
    return CategoryMatcher(
        subtype=AtomicSubtype.COMMUNITY,
        category=AtomicCategory.LIFESTYLE,
        patterns=tuple(patterns),
    )
