"""Narrative chunk builder — 400–800 character passages grouped by marketing focus.

Segmentation cascade (the first strategy yielding more than two segments wins):
  1. blank-line paragraphs
  2. form-field headings ("Pet Policy: ..." at a line start)
  3. sentences longer than 50 characters

Segments are then appended to a running chunk until the chunk would grow
past 800 characters or the segment's focus departs from the chunk's
accumulated focus. How far a focus may drift before it counts as a change
is set by ``focus_overlap_threshold`` (Jaccard overlap; 1.0 means the sets
must be identical, 0 disables focus splitting).
"""

import re

from app.application.services.text_splitting import (
    pack,
    split_fixed_width,
    split_paragraphs,
    split_sentences,
)
from app.domain.entities.document_chunk import (
    CampaignFocus,
    ChunkKind,
    DocumentChunk,
    NarrativeSubtype,
)

# ── Narrative sizing ────────────────────────────────────────────────
_MIN_NARRATIVE_SIZE = 400
_MAX_NARRATIVE_SIZE = 800
_SEGMENT_SPLIT_THRESHOLD = 1000
_OVERSIZED_CHUNK_THRESHOLD = 1200
_FORCE_SPLIT_TARGET = 600
_FORCE_SPLIT_BACKOFF = 0.7
_MIN_SEGMENT_LENGTH = 50
_MIN_SENTENCE_SEGMENT_LENGTH = 50
_MIN_SEGMENT_COUNT = 3

_SEGMENT_JOINER = "\n\n"

_FORM_FIELD_BOUNDARY = re.compile(r"\n(?=[A-Z][^.!?\n]*?:(?:\s|$))")

_FOCUS_KEYWORDS: dict[CampaignFocus, re.Pattern[str]] = {
    CampaignFocus.LUXURY: re.compile(r"\b(?:luxury|premium|upscale|elegant|sophisticated)", re.IGNORECASE),
    CampaignFocus.LOCATION: re.compile(
        r"\b(?:location|convenient|close|near|downtown|shopping|dining)", re.IGNORECASE
    ),
    CampaignFocus.AMENITIES: re.compile(r"\b(?:amenities|pool|gym|fitness|clubhouse)", re.IGNORECASE),
    CampaignFocus.VALUE: re.compile(r"\b(?:affordable|value|competitive|pricing|rent|lease)", re.IGNORECASE),
    CampaignFocus.LIFESTYLE: re.compile(r"\b(?:lifestyle|living|community|home|comfort)", re.IGNORECASE),
}
_DEFAULT_FOCUS = frozenset({CampaignFocus.LIFESTYLE})

# Priority order: the first cluster that matches decides the subtype
_SUBTYPE_KEYWORDS: tuple[tuple[NarrativeSubtype, re.Pattern[str]], ...] = (
    (NarrativeSubtype.AMENITIES, re.compile(r"\b(?:amenities|pool|gym|fitness|clubhouse|spa)", re.IGNORECASE)),
    (
        NarrativeSubtype.LOCATION,
        re.compile(r"\b(?:location|convenient|close|near|downtown|shopping|dining|transportation)", re.IGNORECASE),
    ),
    (
        NarrativeSubtype.LIFESTYLE,
        re.compile(r"\b(?:lifestyle|living|community|resident|home|comfort|target|demographic)", re.IGNORECASE),
    ),
)


def determine_campaign_focus(text: str) -> frozenset[CampaignFocus]:
    """Every focus whose keywords appear in ``text``; lifestyle when none do."""
    focus = frozenset(f for f, pattern in _FOCUS_KEYWORDS.items() if pattern.search(text))
    return focus or _DEFAULT_FOCUS


def determine_narrative_subtype(text: str) -> NarrativeSubtype:
    for subtype, pattern in _SUBTYPE_KEYWORDS:
        if pattern.search(text):
            return subtype
    return NarrativeSubtype.COMMUNITY


def focus_overlap(a: frozenset[CampaignFocus], b: frozenset[CampaignFocus]) -> float:
    """Jaccard overlap of two focus sets (1.0 when identical)."""
    union = a | b
    return len(a & b) / len(union) if union else 1.0


class NarrativeChunkBuilder:
    """Groups a document's prose into focus-coherent narrative chunks."""

    def __init__(
        self,
        *,
        min_size: int = _MIN_NARRATIVE_SIZE,
        max_size: int = _MAX_NARRATIVE_SIZE,
        focus_overlap_threshold: float = 1.0,
    ):
        self._min = min_size
        self._max = max_size
        self._focus_threshold = focus_overlap_threshold

    def build(self, text: str, community_name: str) -> list[DocumentChunk]:
        segments = self.segment(text)
        passages = self._assemble(segments)

        # Only reachable with a custom max_size above the segment cap
        if len(passages) == 1 and len(passages[0][0]) > _OVERSIZED_CHUNK_THRESHOLD:
            pieces = self._force_split_chunk(passages[0][0])
            passages = [(piece, determine_campaign_focus(piece)) for piece in pieces]

        return [self._to_chunk(content, focus, community_name) for content, focus in passages]

    # ── Segmentation ────────────────────────────────────────────────

    def segment(self, text: str) -> list[str]:
        """Split ``text`` with the first strategy that yields enough segments."""
        text = text.strip()
        if not text:
            return []

        paragraphs = split_paragraphs(text)
        segments = paragraphs
        if len(paragraphs) < _MIN_SEGMENT_COUNT:
            candidates = (
                [s for s in _FORM_FIELD_BOUNDARY.split(text) if s.strip()],
                [s for s in split_sentences(text) if len(s) > _MIN_SENTENCE_SEGMENT_LENGTH],
            )
            segments = next((c for c in candidates if len(c) >= _MIN_SEGMENT_COUNT), paragraphs)

        result: list[str] = []
        for segment in segments:
            segment = segment.strip()
            if len(segment) > _SEGMENT_SPLIT_THRESHOLD:
                result.extend(self._force_split_segment(segment))
            else:
                result.append(segment)
        return result

    def _force_split_segment(self, segment: str) -> list[str]:
        pieces: list[str] = []
        for group in pack(split_sentences(segment, strict=False), self._max, separator=" "):
            if len(group) > self._max:
                pieces.extend(split_fixed_width(group, self._max))
            else:
                pieces.append(group)
        return pieces

    # ── Assembly ────────────────────────────────────────────────────

    def _assemble(self, segments: list[str]) -> list[tuple[str, frozenset[CampaignFocus]]]:
        passages: list[tuple[str, frozenset[CampaignFocus]]] = []
        current = ""
        current_focus: frozenset[CampaignFocus] = frozenset()

        for segment in segments:
            if len(segment) < _MIN_SEGMENT_LENGTH:
                continue
            focus = determine_campaign_focus(segment)
            if not current:
                current, current_focus = segment, focus
                continue

            would_exceed = len(current) + len(_SEGMENT_JOINER) + len(segment) > self._max
            focus_changed = self._focus_changed(current_focus, focus)
            # A short running chunk absorbs a focus change instead of being dropped
            if would_exceed or (focus_changed and len(current) >= self._min):
                if len(current) >= self._min:
                    passages.append((current, current_focus))
                current, current_focus = segment, focus
            else:
                current = f"{current}{_SEGMENT_JOINER}{segment}"
                current_focus = current_focus | focus

        if len(current) >= self._min:
            passages.append((current, current_focus))
        return passages

    def _focus_changed(self, running: frozenset[CampaignFocus], incoming: frozenset[CampaignFocus]) -> bool:
        if self._focus_threshold <= 0:
            return False
        return focus_overlap(running, incoming) < self._focus_threshold

    def _force_split_chunk(self, content: str) -> list[str]:
        pieces = pack(
            split_sentences(content, strict=False),
            _FORCE_SPLIT_TARGET,
            separator=" ",
            min_size=self._min,
        )
        if not pieces:
            pieces = split_fixed_width(
                content, _FORCE_SPLIT_TARGET, min_size=self._min, backoff=_FORCE_SPLIT_BACKOFF
            )
        return pieces

    @staticmethod
    def _to_chunk(content: str, focus: frozenset[CampaignFocus], community_name: str) -> DocumentChunk:
        return DocumentChunk(
            content=content,
            kind=ChunkKind.NARRATIVE,
            community_name=community_name,
            subtype=determine_narrative_subtype(content),
            campaign_focus=tuple(f for f in CampaignFocus if f in focus),
        )
