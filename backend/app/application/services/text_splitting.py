"""Low-level splitting and packing helpers shared by the chunking strategies.

All functions are pure: they take a string and return new strings.
"""

import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
# Sentence boundary followed by a capitalised sentence start
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")
# Any sentence boundary, used when force-splitting oversized passages
_LOOSE_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)

# Fraction of a slice that must remain before we back off to a space
_WORD_BOUNDARY_BACKOFF = 0.8


def normalize_text(text: str) -> str:
    """CRLF → LF, tabs → two spaces, outer whitespace trimmed."""
    return text.replace("\r\n", "\n").replace("\t", "  ").strip()


def split_paragraphs(text: str) -> list[str]:
    """Split on blank-line-delimited paragraphs, dropping empty pieces."""
    return [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def split_sentences(text: str, *, strict: bool = True) -> list[str]:
    """Split on ``.``/``!``/``?`` followed by whitespace.

    With ``strict`` the next sentence must start with a capital letter.
    """
    pattern = _SENTENCE_BOUNDARY if strict else _LOOSE_SENTENCE_BOUNDARY
    return [s.strip() for s in pattern.split(text) if s.strip()]


def pack(
    pieces: list[str],
    max_size: int,
    *,
    separator: str = "\n\n",
    min_size: int = 0,
) -> list[str]:
    """Greedily join consecutive pieces while the result stays within ``max_size``.

    A piece that is itself larger than ``max_size`` becomes its own group.
    Groups shorter than ``min_size`` are discarded.
    """
    groups: list[str] = []
    current = ""
    for piece in pieces:
        piece = piece.strip()
        if not piece:
            continue
        if current and len(current) + len(separator) + len(piece) > max_size:
            if len(current) >= min_size:
                groups.append(current)
            current = piece
        else:
            current = f"{current}{separator}{piece}" if current else piece
    if current and len(current) >= min_size:
        groups.append(current)
    return groups


def split_fixed_width(
    text: str, size: int, *, min_size: int = 0, backoff: float = _WORD_BOUNDARY_BACKOFF
) -> list[str]:
    """Slice text into ``size``-char pieces, avoiding mid-word cuts.

    Each slice backs off to the last space when that space lies beyond
    ``backoff`` of the slice length. The next slice starts where the
    previous one was cut, so no characters are lost.
    """
    pieces: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + size, len(text))
        if end < len(text):
            last_space = text.rfind(" ", start, end)
            if last_space - start > size * backoff:
                end = last_space
        piece = text[start:end].strip()
        if piece and len(piece) >= min_size:
            pieces.append(piece)
        start = end
    return pieces


def tidy_chunk(chunk: str) -> str:
    """Collapse 3+ newlines to 2 and strip trailing whitespace on every line."""
    chunk = _EXCESS_NEWLINES.sub("\n\n", chunk.strip())
    return _TRAILING_WHITESPACE.sub("", chunk).strip()
