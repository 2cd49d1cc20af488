"""Tests for inline rewrite rules.

Coverage:
- src/scribo/parser/inline.py - structured and HTML rule chains, escaping
"""

from __future__ import annotations

import html

import pytest

from scribo.parser.inline import (
    HTML_RULES,
    STRUCTURED_RULES,
    apply_rules,
    escape_html,
    transform_html,
    transform_structured,
)


class TestRuleOrder:
    """The order of the rule chains is a contract."""

    @pytest.mark.parametrize("rules", [STRUCTURED_RULES, HTML_RULES])
    def test_bold_before_italic_before_code_before_link(self, rules):
        assert [rule.name for rule in rules] == ["bold", "bold", "italic", "italic", "code", "link"]

    def test_italic_alone_leaves_bold_runs(self):
        """Without the bold rules a ** run is not half-consumed by italic."""
        italic_only = [rule for rule in STRUCTURED_RULES if rule.name == "italic"]
        assert apply_rules("**bold**", italic_only) == "**bold**"


class TestTransformStructured:
    """Tests for transform_structured function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("plain text", "plain text"),
            ("**bold** and __also bold__", "bold and also bold"),
            ("*italic* and _italic_", "italic and italic"),
            ("`code` here", "code here"),
            ("[text](https://example.com)", "text (https://example.com)"),
            ("**a** then *b*", "a then b"),
            ("***both***", "both"),
            ("", ""),
        ],
    )
    def test_syntax_is_stripped(self, text, expected):
        assert transform_structured(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "unmatched *star",
            "a ** b",
            "[broken](link",
            "trailing `tick",
            "2 * 3 = 6",
        ],
    )
    def test_malformed_syntax_stays_literal(self, text):
        assert transform_structured(text) == text

    def test_no_escaping(self):
        assert transform_structured("a < b & c") == "a < b & c"


class TestTransformHtml:
    """Tests for transform_html function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("**bold**", "<strong>bold</strong>"),
            ("__bold__", "<strong>bold</strong>"),
            ("*em*", "<em>em</em>"),
            ("_em_", "<em>em</em>"),
            ("`x`", "<code>x</code>"),
            ("[t](https://e.com)", '<a href="https://e.com">t</a>'),
        ],
    )
    def test_tags(self, text, expected):
        assert transform_html(text) == expected

    def test_escapes_before_rules(self):
        """Markup in the source never reaches the output unescaped."""
        assert transform_html("<b>hi</b> & **x**") == "&lt;b&gt;hi&lt;/b&gt; &amp; <strong>x</strong>"

    def test_code_content_is_escaped(self):
        assert transform_html("`<tag>`") == "<code>&lt;tag&gt;</code>"

    def test_link_url_is_escaped(self):
        assert transform_html("[q](https://e.com/?a=1&b=2)") == '<a href="https://e.com/?a=1&amp;b=2">q</a>'

    def test_star_touching_underscore_is_not_italic(self):
        """Only the underscore pair becomes <em>; no nested emphasis."""
        assert transform_html("_*x*_") == "<em>*x*</em>"
        assert transform_html("a *b* c") == "a <em>b</em> c"

    def test_link_target_hook(self):
        assert transform_html("[t](u) and [v](w)", url_text=str.upper) == '<a href="U">t</a> and <a href="W">v</a>'

    def test_quotes(self):
        assert transform_html("it's \"quoted\"") == "it&#39;s &quot;quoted&quot;"


class TestEscapeHtml:
    """Tests for escape_html function."""

    def test_all_specials(self):
        assert escape_html("&<>\"'") == "&amp;&lt;&gt;&quot;&#39;"

    @pytest.mark.parametrize("text", ["&<>\"'", "a & b", "&amp; already", "<script>alert('x')</script>"])
    def test_roundtrip(self, text):
        assert html.unescape(escape_html(text)) == text
