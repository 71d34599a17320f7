"""Structure analyzer — tags each line of a document as heading / list item / table row / separator.

The analyzer makes one pass over the lines and builds a ``DocumentStructure``.
Tags are independent: a numbered heading is recorded both as a heading and
as a list item. It has no side effects and does no logging.
"""

import re
from collections.abc import Callable

from app.domain.entities.document_structure import DocumentStructure, StructureElement

_MAX_HEADING_LEVEL = 3

_MARKDOWN_HEADING = re.compile(r"^(#{1,6})\s+.+$")
_ALL_CAPS_HEADING = re.compile(r"^[A-Z][A-Z\s&:,-]{2,50}:?\s*$")
_NUMBERED_HEADING = re.compile(r"^\d+\.\s+[A-Z].+$")
_ROMAN_HEADING = re.compile(r"^[IVX]+\.\s+[A-Z].+$")

# Title-case headers: short, no sentence punctuation, mostly capitalised words
_TITLE_CASE_CANDIDATE = re.compile(r"^[A-Z][^.!?]{0,79}$")
_TITLE_CASE_MAX_WORDS = 10
_TITLE_CASE_MIN_RATIO = 2 / 3
_MINOR_WORD_LENGTH = 3  # "of", "and", "the" ... are ignored when counting

_LIST_PATTERNS = (
    re.compile(r"^\s*[-•*]\s+.+$"),
    re.compile(r"^\s*\d+[.)]\s+.+$"),
    re.compile(r"^\s*[a-zA-Z][.)]\s+.+$"),
)

_TABLE_CHARS = re.compile(r"[|,\t]")
_MIN_TABLE_CHARS = 2

_RULE_LINES = (
    re.compile(r"^[-=_]{3,}\s*$"),
    re.compile(r"^\*{3,}\s*$"),
)
_MIN_BLANK_RUN = 2  # two blank lines in a row == three consecutive newlines


def _markdown_level(line: str) -> int | None:
    match = _MARKDOWN_HEADING.match(line)
    if not match:
        return None
    return min(len(match.group(1)), _MAX_HEADING_LEVEL)


def _all_caps_level(line: str) -> int | None:
    return 1 if _ALL_CAPS_HEADING.match(line) else None


def _title_case_level(line: str) -> int | None:
    if not _TITLE_CASE_CANDIDATE.match(line):
        return None
    words = line.rstrip(":").split()
    if not words or len(words) > _TITLE_CASE_MAX_WORDS:
        return None
    if line.endswith(":"):
        return 3
    significant = [w for w in words if len(w) > _MINOR_WORD_LENGTH]
    if not significant:
        return 3
    capitalised = sum(1 for w in significant if w[0].isupper())
    return 3 if capitalised / len(significant) >= _TITLE_CASE_MIN_RATIO else None


def _numbered_level(line: str) -> int | None:
    return 2 if _NUMBERED_HEADING.match(line) else None


def _roman_level(line: str) -> int | None:
    return 2 if _ROMAN_HEADING.match(line) else None


# Ordered: the first detector that returns a level wins.
_HEADING_DETECTORS: tuple[Callable[[str], int | None], ...] = (
    _markdown_level,
    _all_caps_level,
    _title_case_level,
    _numbered_level,
    _roman_level,
)


class StructureAnalyzer:
    """Builds the structural index used by the segmentation cascade."""

    def analyze(self, text: str) -> DocumentStructure:
        """Scan normalized text once and tag every non-blank line."""
        lines = text.split("\n")
        structure = DocumentStructure(line_count=len(lines))
        blank_run_start: int | None = None

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()

            if not line:
                if blank_run_start is None:
                    blank_run_start = index
                elif index - blank_run_start + 1 == _MIN_BLANK_RUN:
                    structure.separators.append(StructureElement(blank_run_start, ""))
                continue
            blank_run_start = None

            level = self.heading_level(line)
            if level is not None:
                structure.headings.append(StructureElement(index, line, level))

            if any(p.match(line) for p in _LIST_PATTERNS):
                structure.list_items.append(StructureElement(index, line))

            if len(_TABLE_CHARS.findall(line)) >= _MIN_TABLE_CHARS:
                structure.table_rows.append(StructureElement(index, line))

            if any(p.match(line) for p in _RULE_LINES):
                structure.separators.append(StructureElement(index, line))

        return structure

    @staticmethod
    def heading_level(line: str) -> int | None:
        """Return the heading level (1..3) of a trimmed line, or None if it is not a heading."""
        for detector in _HEADING_DETECTORS:
            level = detector(line)
            if level is not None:
                return level
        return None
