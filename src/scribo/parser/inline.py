"""Inline markup as explicit, ordered rewrite rules.

Each rule is a compiled pattern plus a replacement, applied once over the
whole line, left to right, non-overlapping and non-recursive. The order of
the rule tuples is part of the contract:

- bold runs before italic, so a single ``*``/``_`` never eats half of ``**``/``__``
- the HTML pipeline escapes ``& < > " '`` before any rule runs

The structured rules drop the syntax and keep plain text. The HTML rules
emit the matching tags.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import NamedTuple

BOLD_ASTERISK = re.compile(r"\*\*(.+?)\*\*")
BOLD_UNDERSCORE = re.compile(r"__(.+?)__")
# Not preceded or followed by the same delimiter, so "**" runs are left alone
ITALIC_ASTERISK = re.compile(r"(?<!\*)\*(?!\*)([^*]+?)(?<!\*)\*(?!\*)")
# HTML also leaves a "*" alone when it touches "_", so "_*x*_" is one <em>
ITALIC_ASTERISK_HTML = re.compile(r"(?<![*_])\*(?!\*)([^*]+?)(?<!\*)\*(?![*_])")
ITALIC_UNDERSCORE = re.compile(r"(?<!_)_([^_]+?)_(?!_)")
INLINE_CODE = re.compile(r"`([^`]+?)`")
EXPLICIT_LINK = re.compile(r"\[([^\]]+?)\]\(([^)]+?)\)")


class InlineRule(NamedTuple):
    """A single rewrite: every match of pattern is replaced."""

    name: str
    pattern: re.Pattern[str]
    replacement: str | Callable[[re.Match[str]], str]

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


STRUCTURED_RULES: tuple[InlineRule, ...] = (
    InlineRule("bold", BOLD_ASTERISK, r"\1"),
    InlineRule("bold", BOLD_UNDERSCORE, r"\1"),
    InlineRule("italic", ITALIC_ASTERISK, r"\1"),
    InlineRule("italic", ITALIC_UNDERSCORE, r"\1"),
    InlineRule("code", INLINE_CODE, r"\1"),
    InlineRule("link", EXPLICIT_LINK, r"\1 (\2)"),
)

HTML_RULES: tuple[InlineRule, ...] = (
    InlineRule("bold", BOLD_ASTERISK, r"<strong>\1</strong>"),
    InlineRule("bold", BOLD_UNDERSCORE, r"<strong>\1</strong>"),
    InlineRule("italic", ITALIC_ASTERISK_HTML, r"<em>\1</em>"),
    InlineRule("italic", ITALIC_UNDERSCORE, r"<em>\1</em>"),
    InlineRule("code", INLINE_CODE, r"<code>\1</code>"),
    InlineRule("link", EXPLICIT_LINK, r'<a href="\2">\1</a>'),
)


def escape_html(text: str) -> str:
    """Escape HTML special characters, quotes included."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def apply_rules(text: str, rules: Iterable[InlineRule]) -> str:
    """Run each rule over text in order."""
    for rule in rules:
        text = rule.apply(text)
    return text


def transform_structured(text: str) -> str:
    """Strip inline syntax, leaving the text the block view displays."""
    if not text:
        return ""
    return apply_rules(text, STRUCTURED_RULES)


def transform_html(text: str, url_text: Callable[[str], str] | None = None) -> str:
    """Escape text, then turn inline syntax into HTML tags.

    Args:
        text: One line of markdown.
        url_text: Rewrites the (escaped) target of each ``[text](url)``
            before it lands in the ``href`` attribute.
    """
    if not text:
        return ""
    if url_text is None:
        return apply_rules(escape_html(text), HTML_RULES)

    def link_tag(match: re.Match[str]) -> str:
        return f'<a href="{url_text(match.group(2))}">{match.group(1)}</a>'

    rules = tuple(rule._replace(replacement=link_tag) if rule.name == "link" else rule for rule in HTML_RULES)
    return apply_rules(escape_html(text), rules)
