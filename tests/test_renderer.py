"""Tests for the structured (block) renderer.

Coverage:
- src/scribo/renderer.py - render_to_blocks, render_inline
- src/scribo/models.py - Block, BlockKind
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import MALFORMED_INPUTS
from scribo import render_to_blocks
from scribo.models import Block, BlockKind, LinkSpan, ProjectContext
from scribo.renderer import MarkdownRenderer


def _assert_index_invariant(blocks: list[Block]) -> None:
    for block in blocks:
        for link in block.links:
            assert block.content[link.start_index : link.start_index + link.length] == link.display_text


class TestBlockKinds:
    """Each line type maps to its block kind."""

    def test_document(self, renderer):
        markdown = "# One\n## Two\n### Three\n#### Four\n- item\n* star item\ntext"
        blocks = renderer.render_to_blocks(markdown)

        assert [(b.kind, b.content) for b in blocks] == [
            (BlockKind.HEADING1, "One"),
            (BlockKind.HEADING2, "Two"),
            (BlockKind.HEADING3, "Three"),
            (BlockKind.HEADING4, "Four"),
            (BlockKind.LIST_ITEM, "item"),
            (BlockKind.LIST_ITEM, "star item"),
            (BlockKind.PARAGRAPH, "text"),
        ]

    def test_heading_four_is_not_heading_one(self, renderer):
        blocks = renderer.render_to_blocks("#### Title")
        assert blocks == [Block(kind=BlockKind.HEADING4, content="Title")]

    def test_blank_line_is_empty_paragraph(self, renderer):
        blocks = renderer.render_to_blocks("a\n\nb")
        assert [(b.kind, b.content) for b in blocks] == [
            (BlockKind.PARAGRAPH, "a"),
            (BlockKind.PARAGRAPH, ""),
            (BlockKind.PARAGRAPH, "b"),
        ]

    def test_inline_syntax_is_stripped(self, renderer):
        blocks = renderer.render_to_blocks("## **Bold** _title_ with `code` and [a link](https://x.y)")
        assert blocks[0].content == "Bold title with code and a link (https://x.y)"
        assert blocks[0].links == []

    def test_trailing_whitespace_trimmed(self, renderer):
        assert renderer.render_to_blocks("text   \t")[0].content == "text"

    def test_crlf_input(self, renderer):
        blocks = renderer.render_to_blocks("# A\r\nb\rc")
        assert [b.content for b in blocks] == ["A", "b", "c"]

    def test_heading_level_property(self):
        assert BlockKind.heading(3).heading_level == 3
        assert BlockKind.PARAGRAPH.heading_level is None


class TestCodeBlocks:
    """Fenced code in the block view."""

    def test_fenced_block(self, renderer):
        blocks = renderer.render_to_blocks("```python\ndef f():\n    return **x**\n\n```")

        assert len(blocks) == 1
        block = blocks[0]
        assert block.kind is BlockKind.CODE_BLOCK
        assert block.content == "def f():\n    return **x**\n"
        assert block.language == "python"
        assert block.links == []

    def test_no_language(self, renderer):
        assert renderer.render_to_blocks("```\nx\n```")[0].language is None

    def test_odd_number_of_fences(self, renderer):
        """Everything after the unmatched fence lands in one code block."""
        blocks = renderer.render_to_blocks("```\na\n```\ntext\n```\n# b\n\n- c")

        assert [b.kind for b in blocks] == [BlockKind.CODE_BLOCK, BlockKind.PARAGRAPH, BlockKind.CODE_BLOCK]
        assert blocks[-1].content == "# b\n\n- c"

    def test_empty_fence_emits_nothing(self, renderer):
        assert renderer.render_to_blocks("```\n```") == []

    def test_links_in_code_are_literal(self, renderer):
        block = renderer.render_to_blocks("```\n[[Not A Link]]\n```")[0]
        assert block.content == "[[Not A Link]]"
        assert block.links == []


class TestEmptyInput:
    """Empty and whitespace-only input."""

    @pytest.mark.parametrize("markdown", ["", " ", "\n\n", "\r\n\t \r"])
    def test_no_blocks(self, renderer, markdown):
        assert renderer.render_to_blocks(markdown) == []

    def test_module_function(self):
        assert render_to_blocks("") == []


class TestLinks:
    """[[links]] in the block view."""

    def test_unresolved_without_project(self, renderer):
        block = renderer.render_to_blocks("See [[Captain Reyes]].")[0]

        assert block.content == "See Captain Reyes."
        assert len(block.links) == 1
        link = block.links[0]
        assert (link.start_index, link.length) == (4, 13)
        assert link.resolved is False
        assert link.target_identifier == "Captain Reyes"

    def test_resolved_with_project(self, renderer, project):
        block = renderer.render_to_blocks("Meet [[Captain Reyes]] at [[the harbor|the docks]].", project)[0]

        assert block.content == "Meet Captain Reyes at the docks."
        first, second = block.links
        assert (first.start_index, first.length, first.target_identifier) == (5, 13, "doc-reyes")
        assert (second.start_index, second.length, second.target_identifier) == (22, 9, "doc-harbor")
        assert first.resolved and second.resolved
        assert second.link_text == "the harbor"

    def test_unresolved_link_is_kept(self, renderer, project):
        block = renderer.render_to_blocks("- Ask [[Nobody]] about [[Port]]", project)[0]

        assert block.kind is BlockKind.LIST_ITEM
        assert [link.resolved for link in block.links] == [False, True]
        assert block.links[0].target_identifier == "Nobody"

    def test_second_display_longer_keeps_first_offset(self, renderer):
        block = renderer.render_to_blocks("[[A]] then [[B|a considerably longer display text]]")[0]

        assert block.links[0].start_index == 0
        assert block.links[1].start_index == len("A then ")
        _assert_index_invariant([block])

    def test_emphasis_before_link(self, renderer):
        block = renderer.render_to_blocks("# **Very** _bold_ [[Mira]] and `[[The Harbor]]`")[0]

        assert block.content == "Very bold Mira and The Harbor"
        _assert_index_invariant([block])

    @pytest.mark.parametrize(
        "markdown",
        [
            "[[a]] [[b]] [[c]]",
            "**[[a|x]]** *[[b|longer display]]* __[[c]]__",
            "[label](url) [[a_b_c]] `[[d]]`",
            "- [[List Link|shown]] trailing **bold**",
            "#### [[H]] ## [[I]]",
        ],
    )
    def test_index_invariant(self, renderer, project, markdown):
        _assert_index_invariant(renderer.render_to_blocks(markdown, project))

    def test_blocks_are_frozen(self, renderer):
        block = renderer.render_to_blocks("text")[0]
        with pytest.raises(ValidationError):
            block.content = "other"


class TestTotality:
    """Rendering never raises for string input."""

    @pytest.mark.parametrize("markdown", MALFORMED_INPUTS)
    def test_malformed_input(self, renderer, project, markdown):
        blocks = renderer.render_to_blocks(markdown, project)
        _assert_index_invariant(blocks)


class _RecordingLinkService:
    """Link service double that finds one fixed link and records resolve calls."""

    def __init__(self, span: LinkSpan | None = None):
        self.span = span
        self.resolved_with: list[ProjectContext | None] = []

    def detect_links(self, text: str) -> list[LinkSpan]:
        return [self.span.model_copy()] if self.span else []

    def resolve_links(self, links, project_context) -> None:
        self.resolved_with.append(project_context)
        for link in links:
            link.resolved = project_context is not None


class TestLinkServiceInjection:
    """The link collaborator is passed in, not looked up."""

    def test_injected_service_is_used(self, project):
        span = LinkSpan(start_index=0, length=5, display_text="Tide", target_identifier="tide")
        service = _RecordingLinkService(span)

        blocks = MarkdownRenderer(service).render_to_blocks("[[x]] rises", project)

        assert service.resolved_with == [project]
        assert blocks[0].content == "Tide rises"
        assert blocks[0].links[0].resolved is True

    def test_module_function_accepts_service(self):
        service = _RecordingLinkService()
        render_to_blocks("plain", link_service=service)
        assert service.resolved_with == []

    def test_position_drift_is_tolerated(self):
        """A span past the end of the line is kept, unadjusted."""
        span = LinkSpan(start_index=40, length=5, display_text="x", target_identifier="x")

        blocks = MarkdownRenderer(_RecordingLinkService(span)).render_to_blocks("short line")

        assert blocks[0].content == "short line"
        assert blocks[0].links[0].start_index == 40
