"""Split composite source files into raw document segments."""

from __future__ import annotations

import re
from dataclasses import dataclass

from postcorpus.config import DEFAULT_SENTINEL, SentinelMode


@dataclass(frozen=True, slots=True)
class RawSegment:
    """A trimmed slice of a source file between sentinel boundaries.

    Attributes:
        source_path: File the segment came from, relative to the content directory.
        index: 0-based position among the file's non-empty segments.
        count: Number of non-empty segments the file produced.
        text: Segment text with surrounding whitespace removed.

    """

    source_path: str
    index: int
    count: int
    text: str


def split_text(text: str, sentinel: str = DEFAULT_SENTINEL, mode: SentinelMode = "literal") -> list[str]:
    """Split ``text`` on ``sentinel`` and drop segments that are blank after trimming.

    In ``literal`` mode every occurrence is a boundary, including ones inside
    fenced code blocks. In ``line`` mode only a line holding nothing but the
    sentinel is. The sentinel is never interpreted as a pattern.
    """
    if mode == "line":
        boundary = re.compile(rf"^[^\S\n]*{re.escape(sentinel)}[^\S\n]*$", re.MULTILINE)
        pieces = boundary.split(text)
    else:
        pieces = text.split(sentinel)
    return [stripped for piece in pieces if (stripped := piece.strip())]


def split_segments(
    source_path: str,
    text: str,
    sentinel: str = DEFAULT_SENTINEL,
    mode: SentinelMode = "literal",
) -> list[RawSegment]:
    """Divide one file's contents into ordered :class:`RawSegment` records."""
    pieces = split_text(text, sentinel, mode)
    return [
        RawSegment(source_path=source_path, index=index, count=len(pieces), text=piece)
        for index, piece in enumerate(pieces)
    ]
