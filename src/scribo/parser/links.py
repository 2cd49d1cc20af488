"""Double-bracket link extraction.

Handles ``[[target]]`` and ``[[target|display text]]``. Detection reports
offsets into the text it was given; reconcile.py moves them once the line
has been rewritten.
"""

from __future__ import annotations

import re
from typing import Protocol

from ..config import LINK_RESOLVED_MARKER, LINK_UNRESOLVED_MARKER
from ..models import LinkSpan, ProjectContext

# Pattern for [[link]] syntax - captures content between double brackets
LINK_PATTERN = re.compile(r"\[\[([^\]]+?)\]\]")


class LinkService(Protocol):
    """What the renderer needs from a link detection/resolution collaborator."""

    def detect_links(self, text: str) -> list[LinkSpan]: ...

    def resolve_links(self, links: list[LinkSpan], project_context: ProjectContext | None) -> None: ...


def detect_links(text: str) -> list[LinkSpan]:
    """Find every double-bracket link in text.

    The first ``|``-separated part is the target, the second (if any) the
    display text, which defaults to the target. Links whose target is blank
    (``[[ ]]``) are left as literal text.

    Args:
        text: A single line of markdown.

    Returns:
        Unresolved spans in left-to-right order, offsets into text.
    """
    links: list[LinkSpan] = []
    if not text:
        return links

    for match in LINK_PATTERN.finditer(text):
        parts = match.group(1).split("|")
        target = parts[0].strip()
        if not target:
            continue
        display = parts[1].strip() if len(parts) > 1 else ""

        links.append(
            LinkSpan(
                start_index=match.start(),
                length=match.end() - match.start(),
                display_text=display or target,
                target_identifier=target,
                link_text=target,
            )
        )

    return links


def extract_links(content: str) -> list[str]:
    """Extract link targets from markdown content.

    Args:
        content: Markdown content to extract links from.

    Returns:
        List of unique link targets (normalized, without .md extension).
    """
    seen: set[str] = set()
    links: list[str] = []

    for span in detect_links(content):
        normalized = normalize_link(span.link_text)
        if normalized and normalized not in seen:
            seen.add(normalized)
            links.append(normalized)

    return links


def normalize_link(link: str) -> str:
    """Normalize a link target.

    - Strips whitespace
    - Removes .md extension
    - Normalizes path separators

    Args:
        link: Raw link target.

    Returns:
        Normalized link target.
    """
    link = link.strip()

    if link.endswith(".md"):
        link = link[:-3]

    link = link.replace("\\", "/")

    return link.strip("/")


def replace_links_for_display(text: str, links: list[LinkSpan]) -> str:
    """Replace each link range with its marked display text.

    Resolved links read ``🔗 display``, unresolved ones ``❓ display``. The
    offsets must index into text. Links are spliced right to left so the
    ranges still to be replaced are never shifted; a range that does not
    fit in text is skipped.
    """
    if not text or not links:
        return text

    result = text
    for link in sorted(links, key=lambda span: span.start_index, reverse=True):
        marker = LINK_RESOLVED_MARKER if link.resolved else LINK_UNRESOLVED_MARKER
        if link.end_index <= len(result):
            result = result[: link.start_index] + f"{marker} {link.display_text}" + result[link.end_index :]

    return result
