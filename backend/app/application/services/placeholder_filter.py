"""Detects Latin "lorem ipsum" placeholder text left in design templates.

A chunk is treated as placeholder when any of these hold:
  * a well-known placeholder phrase appears ("lorem ipsum", "dolor sit amet" ...)
  * at least half of its words are common placeholder Latin words
  * unique Latin words make up 40% of its vocabulary (and there are 3 or more)
  * three or more distinct Latin words are repeated
"""

import re
from collections import Counter

from app.domain.entities.document_chunk import DocumentChunk

_LATIN_WORDS = frozenset(
    """
    lorem ipsum dolor sit amet consectetur adipiscing elit sed eiusmod tempor incididunt
    labore dolore magna aliqua enim minim veniam quis nostrud exercitation ullamco laboris
    nisi aliquip commodo consequat duis aute irure reprehenderit voluptate velit esse
    cillum fugiat nulla pariatur excepteur sint occaecat cupidatat non proident sunt culpa
    qui officia deserunt mollit anim est laborum vivamus mauris placerat eleifend leo diam
    sollicitudin fermentum ligula vitae hendrerit bibendum cursus risus pharetra vel
    """.split()
)

_PLACEHOLDER_PHRASES = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"lorem.{0,3}ipsum",
        r"ipsum\s*dolor",
        r"dolor.{0,3}sit.{0,3}amet",
        r"consectetur.{0,3}adipiscing",
        r"eiusmod\s*tempor",
        r"\but.{0,3}labore.{0,3}et.{0,3}dolore",
        r"magna.{0,3}aliqua",
        r"\benim.{0,3}ad.{0,3}minim",
        r"veniam\s*quis\s*nostrud",
        r"exercitation\s*ullamco",
        r"ullamco.{0,3}laboris",
        r"commodo.{0,3}consequat",
        r"duis.{0,3}aute",
        r"irure.{0,3}dolor",
        r"voluptate.{0,3}velit",
        r"cillum.{0,3}dolore",
        r"fugiat.{0,3}nulla",
        r"excepteur.{0,3}sint",
        r"occaecat.{0,3}cupidatat",
        r"cupidatat\s*non\s*proident",
        r"\bsunt.{0,3}in.{0,3}culpa",
        r"deserunt.{0,3}mollit",
        r"sitamet|ametlorem",
    )
)

_NON_WORD = re.compile(r"[^\w\s]")
_MIN_WORD_LENGTH = 3
_MIN_WORDS_FOR_RATIO = 3
_LATIN_WORD_RATIO = 0.5
_UNIQUE_LATIN_RATIO = 0.4
_MIN_UNIQUE_LATIN_WORDS = 3
_MIN_REPEATED_LATIN_WORDS = 3


def is_placeholder_text(text: str) -> bool:
    """Return True if ``text`` reads as Latin placeholder copy."""
    if not text or not text.strip():
        return False
    if any(p.search(text) for p in _PLACEHOLDER_PHRASES):
        return True

    words = [w for w in _NON_WORD.sub(" ", text.lower()).split() if len(w) >= _MIN_WORD_LENGTH]
    if len(words) < _MIN_WORDS_FOR_RATIO:
        return False

    counts = Counter(words)
    latin = [w for w in words if w in _LATIN_WORDS]
    unique_latin = {w for w in latin}

    if len(unique_latin) >= _MIN_UNIQUE_LATIN_WORDS and len(unique_latin) / len(counts) >= _UNIQUE_LATIN_RATIO:
        return True
    if len(latin) / len(words) >= _LATIN_WORD_RATIO:
        return True
    repeated = sum(1 for w in unique_latin if counts[w] >= 2)
    return repeated >= _MIN_REPEATED_LATIN_WORDS


def remove_placeholder_chunks(chunks: list[DocumentChunk]) -> tuple[list[DocumentChunk], int]:
    """Drop placeholder chunks; return the kept chunks and how many were removed."""
    kept = [c for c in chunks if not is_placeholder_text(c.content)]
    return kept, len(chunks) - len(kept)
