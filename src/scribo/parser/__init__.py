"""Markdown segmentation, inline rules and [[link]] handling."""

from .inline import HTML_RULES, STRUCTURED_RULES, InlineRule, escape_html, transform_html, transform_structured
from .links import LinkService, detect_links, extract_links, normalize_link, replace_links_for_display
from .reconcile import reconcile
from .segmenter import LineKind, Segment, SegmentKind, classify_line, segment_markdown, split_lines
from .title_index import DocumentLinkService, build_title_index, resolve_link_target

__all__ = [
    "segment_markdown",
    "classify_line",
    "split_lines",
    "LineKind",
    "Segment",
    "SegmentKind",
    "InlineRule",
    "STRUCTURED_RULES",
    "HTML_RULES",
    "escape_html",
    "transform_structured",
    "transform_html",
    "LinkService",
    "detect_links",
    "extract_links",
    "normalize_link",
    "replace_links_for_display",
    "reconcile",
    "DocumentLinkService",
    "build_title_index",
    "resolve_link_target",
]
