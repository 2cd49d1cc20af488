"""Block segmentation: raw markdown to an ordered stream of classified segments.

A single forward pass over the lines with one piece of state, whether we are
inside a fenced code block. Lines are classified by their leading characters
after trailing whitespace is trimmed; inline markup is left to the renderers.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple

from ..config import FENCE_MARKER, HEADING_MARKERS, LIST_MARKERS

# "\r\n", "\n" and "\r" are equivalent line breaks. str.splitlines() is not
# used because it also splits on form feeds and unicode separators.
LINE_BREAK_PATTERN = re.compile(r"\r\n|\n|\r")


class LineKind(Enum):
    """Classification of a single line."""

    CODE_FENCE = "code_fence"
    HEADING = "heading"
    LIST_ITEM = "list_item"
    BLANK = "blank"
    PARAGRAPH = "paragraph"


class LineClass(NamedTuple):
    """A classified line with its marker stripped."""

    kind: LineKind
    text: str  # Marker-stripped text; the fence info string for CODE_FENCE
    level: int = 0  # Heading level, 0 for other kinds


class SegmentKind(Enum):
    """Kind of a segment produced by segment_markdown()."""

    HEADING = "heading"
    LIST_ITEM = "list_item"
    BLANK = "blank"
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "code_block"


class Segment(NamedTuple):
    """A classified group of lines: one line, or the body of a code fence."""

    kind: SegmentKind
    text: str = ""
    level: int = 0
    language: str = ""
    lines: tuple[str, ...] = ()

    @property
    def code(self) -> str:
        """Code block body, lines joined with newlines."""
        return "\n".join(self.lines)


_LINE_TO_SEGMENT = {
    LineKind.HEADING: SegmentKind.HEADING,
    LineKind.LIST_ITEM: SegmentKind.LIST_ITEM,
    LineKind.BLANK: SegmentKind.BLANK,
    LineKind.PARAGRAPH: SegmentKind.PARAGRAPH,
}


def split_lines(text: str) -> list[str]:
    """Split text on any of the three line break conventions."""
    return LINE_BREAK_PATTERN.split(text)


def classify_line(line: str) -> LineClass:
    """Classify one line by its leading characters.

    Trailing whitespace is trimmed first. Leading whitespace is kept, so an
    indented marker ("  - item") does not count and the line is a paragraph.

    Args:
        line: A single line without its line break.

    Returns:
        The classification and the text left after stripping the marker.
    """
    trimmed = line.rstrip()

    if trimmed.startswith(FENCE_MARKER):
        return LineClass(LineKind.CODE_FENCE, trimmed[len(FENCE_MARKER) :].strip())

    for marker, level in HEADING_MARKERS:
        if trimmed.startswith(marker):
            return LineClass(LineKind.HEADING, trimmed[len(marker) :], level)

    for marker in LIST_MARKERS:
        if trimmed.startswith(marker):
            return LineClass(LineKind.LIST_ITEM, trimmed[len(marker) :])

    if not trimmed:
        return LineClass(LineKind.BLANK, "")

    return LineClass(LineKind.PARAGRAPH, trimmed)


def segment_markdown(markdown: str, *, keep_empty_code_blocks: bool = False) -> Iterator[Segment]:
    """Split markdown into classified segments.

    Lines inside a fence are collected verbatim (untrimmed, blank lines
    included) and never classified. A fence left open at end of input still
    yields its collected lines.

    Args:
        markdown: Raw markdown text.
        keep_empty_code_blocks: Also yield fences that enclose no lines. The
            HTML renderer needs them because a fence closes an open paragraph.

    Yields:
        Segments in document order.
    """
    in_fence = False
    language = ""
    fence_lines: list[str] = []

    for line in split_lines(markdown):
        line_class = classify_line(line)

        if line_class.kind is LineKind.CODE_FENCE:
            if in_fence:
                if fence_lines or keep_empty_code_blocks:
                    yield Segment(SegmentKind.CODE_BLOCK, language=language, lines=tuple(fence_lines))
                fence_lines = []
                in_fence = False
            else:
                in_fence = True
                language = line_class.text
            continue

        if in_fence:
            fence_lines.append(line)
            continue

        yield Segment(_LINE_TO_SEGMENT[line_class.kind], line_class.text, line_class.level)

    # Unterminated fence
    if in_fence and (fence_lines or keep_empty_code_blocks):
        yield Segment(SegmentKind.CODE_BLOCK, language=language, lines=tuple(fence_lines))
