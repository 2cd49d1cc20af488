"""Keep link offsets valid while a line is rewritten.

Links are detected on the raw line, but the inline rules rewrite the line
before the block view sees it: ``**bold** [[Target]]`` loses four characters
in front of the link. Splicing display text back in at the raw offsets is
only correct for text to the right of every rewrite.

Instead, each link range is swapped for a sentinel: a private-use character
that does not occur in the line and that no inline rule consumes. The rules
run on the protected line, and the result is copied forward once with a
cursor. Every sentinel is replaced by its link's display text and the link's
start_index/length are set to where that display text landed. Links are
consumed in ascending order, so each recorded offset is measured in the
finished string. Display text is never seen by the rules and stays literal.
"""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Callable, Iterator

from ..models import LinkSpan

log = logging.getLogger(__name__)

# BMP private use area, then the supplementary private use planes
_SENTINEL_RANGES = (range(0xE000, 0xF900), range(0xF0000, 0xFFFFE), range(0x100000, 0x10FFFE))


def _sentinel_candidates(text: str) -> Iterator[str]:
    used = set(text)
    for codepoint in itertools.chain.from_iterable(_SENTINEL_RANGES):
        char = chr(codepoint)
        if char not in used:
            yield char


def protect_links(text: str, links: list[LinkSpan]) -> tuple[str, dict[str, LinkSpan]]:
    """Swap every link range in text for a unique sentinel character.

    A link whose range overlaps an earlier one, runs past the end of text,
    or finds every sentinel character taken is left in place and keeps its
    offsets (position drift).

    Returns:
        The protected text and a sentinel -> link mapping.
    """
    sentinels: dict[str, LinkSpan] = {}
    if not links:
        return text, sentinels

    candidates = _sentinel_candidates(text)
    pieces: list[str] = []
    cursor = 0

    for link in sorted(links, key=lambda span: span.start_index):
        if link.start_index < cursor or link.end_index > len(text):
            log.warning(
                "Link position drift: [[%s]] at %d+%d does not fit a line of length %d",
                link.target_identifier,
                link.start_index,
                link.length,
                len(text),
            )
            continue

        sentinel = next(candidates, None)
        if sentinel is None:
            log.warning(
                "Link position drift: no free sentinel left for [[%s]] at %d+%d",
                link.target_identifier,
                link.start_index,
                link.length,
            )
            continue

        pieces.append(text[cursor : link.start_index])
        pieces.append(sentinel)
        sentinels[sentinel] = link
        cursor = link.end_index

    pieces.append(text[cursor:])
    return "".join(pieces), sentinels


def restore_links(
    text: str,
    sentinels: dict[str, LinkSpan],
    render_link: Callable[[LinkSpan], str] | None = None,
) -> str:
    """Replace sentinels with link text and relocate the links.

    Args:
        text: Rewritten text that still holds the sentinels.
        sentinels: Mapping returned by protect_links().
        render_link: Produces the replacement for a link. Defaults to its
            display text, in which case each link's start_index and length
            end up spanning exactly its display text in the returned string.

    Returns:
        The final text.
    """
    if not sentinels:
        return text

    pattern = re.compile("[" + "".join(re.escape(char) for char in sentinels) + "]")
    pieces: list[str] = []
    size = 0
    cursor = 0
    placed: set[str] = set()

    for match in pattern.finditer(text):
        before = text[cursor : match.start()]
        pieces.append(before)
        size += len(before)

        link = sentinels[match.group()]
        replacement = render_link(link) if render_link else link.display_text
        if match.group() not in placed:
            placed.add(match.group())
            link.start_index = size
            link.length = len(replacement)
        pieces.append(replacement)
        size += len(replacement)
        cursor = match.end()

    pieces.append(text[cursor:])

    for sentinel, link in sentinels.items():
        if sentinel not in placed:
            log.warning("Link position drift: [[%s]] was lost while rewriting the line", link.target_identifier)

    return "".join(pieces)


def reconcile(
    text: str,
    links: list[LinkSpan],
    transform: Callable[[str], str],
    render_link: Callable[[LinkSpan], str] | None = None,
) -> str:
    """Rewrite text with transform while keeping links pointed at their display text.

    Args:
        text: The raw line the links were detected in.
        links: Spans with offsets into text; updated in place.
        transform: The inline rewrite, e.g. transform_structured.
        render_link: Optional replacement for each link (HTML anchors).

    Returns:
        The rewritten line with link text spliced in.
    """
    protected, sentinels = protect_links(text, links)
    return restore_links(transform(protected), sentinels, render_link)
