"""Configuration management for scribo.

This module contains the configurable constants of the renderer.
Magic strings are documented here rather than scattered throughout the codebase.
"""

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

# =============================================================================
# Markdown syntax
# =============================================================================

# A trimmed line starting with this toggles a fenced code block
FENCE_MARKER = "```"

# Heading markers, longest first: "#### " must be tried before "# "
HEADING_MARKERS: tuple[tuple[str, int], ...] = (
    ("#### ", 4),
    ("### ", 3),
    ("## ", 2),
    ("# ", 1),
)

LIST_MARKERS: tuple[str, ...] = ("- ", "* ")

# =============================================================================
# Link display
# =============================================================================

# Prefixes used by replace_links_for_display()
LINK_RESOLVED_MARKER = "🔗"
LINK_UNRESOLVED_MARKER = "❓"

# Fall back to "title contains target" when no exact title/alias/path matches.
# Disable with SCRIBO_PARTIAL_TITLE_MATCH=0
PARTIAL_TITLE_MATCH_DEFAULT = True

# =============================================================================
# HTML export
# =============================================================================

DEFAULT_DOCUMENT_TITLE = "Document"

HTML_STYLESHEET = """\
body { font-family: 'Inter', 'Segoe UI', sans-serif; font-size: 14px; line-height: 1.6; padding: 20px; margin: 0; }
h1 { font-size: 2em; margin-top: 0.67em; margin-bottom: 0.67em; font-weight: bold; }
h2 { font-size: 1.5em; margin-top: 0.83em; margin-bottom: 0.83em; font-weight: bold; }
h3 { font-size: 1.17em; margin-top: 1em; margin-bottom: 1em; font-weight: bold; }
h4 { font-size: 1em; margin-top: 1.33em; margin-bottom: 1.33em; font-weight: bold; }
p { margin-top: 1em; margin-bottom: 1em; }
ul, ol { margin-top: 1em; margin-bottom: 1em; padding-left: 2em; }
li { margin-top: 0.5em; margin-bottom: 0.5em; }
code { background-color: #f4f4f4; padding: 2px 4px; border-radius: 3px; font-family: 'Consolas', monospace; }
pre { background-color: #f4f4f4; padding: 10px; border-radius: 5px; overflow-x: auto; }
pre code { background-color: transparent; padding: 0; }
a { color: #0066cc; text-decoration: none; }
a:hover { text-decoration: underline; }
a.wikilink { border-bottom: 1px dotted #0066cc; }
a.wikilink.unresolved { color: #cc3300; border-bottom-color: #cc3300; }
strong { font-weight: bold; }
em { font-style: italic; }
"""


def get_stylesheet() -> str:
    """Return the CSS embedded in exported HTML documents.

    SCRIBO_STYLESHEET may point at a CSS file that replaces the built-in
    stylesheet. An unreadable file falls back to the built-in one.
    """
    override = os.environ.get("SCRIBO_STYLESHEET")
    if not override:
        return HTML_STYLESHEET

    path = Path(override).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Ignoring SCRIBO_STYLESHEET=%s: %s", override, e)
        return HTML_STYLESHEET


def partial_title_match_enabled() -> bool:
    """Whether link resolution may fall back to partial title matches."""
    value = os.environ.get("SCRIBO_PARTIAL_TITLE_MATCH")
    if value is None:
        return PARTIAL_TITLE_MATCH_DEFAULT
    return value.strip().lower() not in ("0", "false", "no", "off")
