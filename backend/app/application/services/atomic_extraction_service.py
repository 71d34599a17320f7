"""Atomic component extraction — short, self-contained marketing "ingredients".

Runs every category in the pattern library over the document and keeps
matches between 8 and 90 characters. A text seen once (compared
case-insensitively) is emitted once, attributed to the first category that
matched it.
"""

from collections.abc import Mapping

from app.application.services.atomic_patterns import (
    ATOMIC_PATTERN_LIBRARY,
    CategoryMatcher,
    build_community_matcher,
)
from app.application.services.community_name_resolver import UNKNOWN_COMMUNITY
from app.domain.entities.document_chunk import ChunkKind, DocumentChunk

_MIN_ATOMIC_LENGTH = 8
_MAX_ATOMIC_LENGTH = 90


class AtomicExtractionService:
    """Pulls atomic chunks out of raw document text."""

    def __init__(
        self,
        library: Mapping[str, CategoryMatcher] | None = None,
        *,
        min_length: int = _MIN_ATOMIC_LENGTH,
        max_length: int = _MAX_ATOMIC_LENGTH,
    ):
        self._library = dict(ATOMIC_PATTERN_LIBRARY if library is None else library)
        self._min_length = min_length
        self._max_length = max_length

    def extract(self, text: str, community_name: str) -> list[DocumentChunk]:
        """Return atomic chunks in category order, then pattern order, then document order."""
        known_name = community_name if community_name != UNKNOWN_COMMUNITY else None
        matchers = [*self._library.values(), build_community_matcher(known_name)]

        chunks: list[DocumentChunk] = []
        seen: set[str] = set()
        for matcher in matchers:
            for match in matcher.find(text):
                if not self._min_length <= len(match.content) <= self._max_length:
                    continue
                key = match.content.lower()
                if key in seen:
                    continue
                seen.add(key)
                chunks.append(
                    DocumentChunk(
                        content=match.content,
                        kind=ChunkKind.ATOMIC,
                        community_name=community_name,
                        subtype=matcher.subtype,
                        atomic_category=matcher.category,
                        attributes=match.attributes,
                    )
                )
        return chunks
