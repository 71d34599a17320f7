"""Resolves the community (property) name a document's chunks are attributed to.

A caller-supplied name always wins. Otherwise the name is looked up in the
document itself, first via labelled form fields ("Property Name: ...") and
then via common property-name shapes. The placeholder ``UNKNOWN_COMMUNITY``
is returned when nothing is found.
"""

import re

UNKNOWN_COMMUNITY = "Unknown Community"

_MAX_NAME_LENGTH = 200
_MIN_NAME_LENGTH = 4

_LABELLED_PATTERNS = (
    re.compile(r"Community/Business Name:[ \t]*([^\n]+)", re.IGNORECASE),
    re.compile(r"Business Name:[ \t]*([^\n]+)", re.IGNORECASE),
    re.compile(r"Community Name:[ \t]*([^\n]+)", re.IGNORECASE),
    re.compile(r"Property Name:[ \t]*([^\n]+)", re.IGNORECASE),
    re.compile(r"CLIENT ONBOARDING INFORMATION FOR[ \t]+([^\n]+)", re.IGNORECASE),
)

# Capitalised word runs ending in a property suffix, "X at Y", or "The X"
_SHAPE_PATTERNS = (
    re.compile(r"\b((?:[A-Z][a-zA-Z&]*[ \t]+){1,5}(?:Apartments?|Community|Properties|Residences?))\b"),
    re.compile(r"\b((?:[A-Z][a-zA-Z&]*[ \t]+){1,4}at(?:[ \t]+[A-Z][a-zA-Z&]*){1,4})\b"),
    re.compile(r"\b(The(?:[ \t]+[A-Z][a-zA-Z&]*){1,5})\b"),
)

_TRAILING_NOISE = re.compile(r"\s+(?:BASIC INFORMATION|INFO|DETAILS)\b.*$", re.IGNORECASE)
_GENERIC_TERMS = re.compile(r"^(?:Type|Property|Address|Website|Information|Details)$", re.IGNORECASE)


def extract_community_name(text: str) -> str | None:
    """Find a community name in document content, or None."""
    for pattern in (*_LABELLED_PATTERNS, *_SHAPE_PATTERNS):
        match = pattern.search(text)
        if not match:
            continue
        candidate = _clean(match.group(1))
        if len(candidate) >= _MIN_NAME_LENGTH and not _GENERIC_TERMS.match(candidate):
            return candidate
    return None


def resolve_community_name(provided: str | None, text: str) -> str:
    """Pick the caller's name if given, else one found in ``text``, else the placeholder."""
    if provided and provided.strip():
        return provided.strip()
    return extract_community_name(text) or UNKNOWN_COMMUNITY


def _clean(raw: str) -> str:
    name = _TRAILING_NOISE.sub("", raw.strip())
    return name[:_MAX_NAME_LENGTH].strip()
