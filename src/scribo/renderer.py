"""Markdown rendering to blocks (for the document view) and to HTML (for export).

Both pipelines run the same segmenter and the same inline rules. They differ
in what they emit per segment, and in HTML open/close tracking for
paragraphs and lists.
"""

from __future__ import annotations

import logging

from .models import Block, BlockKind, LinkSpan, ProjectContext
from .parser.inline import escape_html, transform_html, transform_structured
from .parser.links import LinkService
from .parser.reconcile import protect_links, reconcile, restore_links
from .parser.segmenter import Segment, SegmentKind, segment_markdown
from .parser.title_index import DocumentLinkService
from .publisher.templates import render_document

log = logging.getLogger(__name__)


class _HtmlBody:
    """Accumulates body HTML, tracking the open paragraph and list."""

    def __init__(self) -> None:
        self.parts: list[str] = []
        self.in_paragraph = False
        self.in_list = False

    def append(self, html: str) -> None:
        self.parts.append(html)

    def paragraph_line(self, html: str) -> None:
        if self.in_paragraph:
            self.parts.append(" ")
        else:
            self.parts.append("<p>")
            self.in_paragraph = True
        self.parts.append(html)

    def close_paragraph(self) -> None:
        if self.in_paragraph:
            self.parts.append("</p>")
            self.in_paragraph = False

    def open_list(self) -> None:
        if not self.in_list:
            self.parts.append("<ul>")
            self.in_list = True

    def close_list(self) -> None:
        if self.in_list:
            self.parts.append("</ul>")
            self.in_list = False

    def finish(self) -> str:
        # Innermost first: a paragraph can be open inside a list
        self.close_paragraph()
        self.close_list()
        return "".join(self.parts)


class MarkdownRenderer:
    """Renders markdown to blocks or to a standalone HTML document.

    The link collaborator is injected here rather than looked up globally.
    A renderer holds no per-render state, so one instance can be shared.

    Args:
        link_service: Detects and resolves [[links]]. Defaults to
            DocumentLinkService.
    """

    def __init__(self, link_service: LinkService | None = None) -> None:
        self.link_service: LinkService = link_service or DocumentLinkService()

    # ─────────────────────────────────────────────────────────────────────
    # Blocks
    # ─────────────────────────────────────────────────────────────────────

    def render_to_blocks(self, markdown: str, project_context: ProjectContext | None = None) -> list[Block]:
        """Render markdown into the block sequence used by the document view.

        Every blank line becomes an empty paragraph block. Link spans on each
        block index into that block's content.

        Args:
            markdown: Raw markdown text.
            project_context: Documents [[links]] resolve against, if any.

        Returns:
            Blocks in document order; empty for empty or whitespace-only input.
        """
        blocks: list[Block] = []
        if not markdown or not markdown.strip():
            return blocks

        for segment in segment_markdown(markdown):
            blocks.append(self._segment_to_block(segment, project_context))

        log.debug("Rendered %d blocks", len(blocks))
        return blocks

    def _segment_to_block(self, segment: Segment, project_context: ProjectContext | None) -> Block:
        if segment.kind is SegmentKind.CODE_BLOCK:
            return Block(kind=BlockKind.CODE_BLOCK, content=segment.code, language=segment.language or None)

        if segment.kind is SegmentKind.BLANK:
            return Block(kind=BlockKind.PARAGRAPH)

        if segment.kind is SegmentKind.HEADING:
            kind = BlockKind.heading(segment.level)
        elif segment.kind is SegmentKind.LIST_ITEM:
            kind = BlockKind.LIST_ITEM
        else:
            kind = BlockKind.PARAGRAPH

        content, links = self.render_inline(segment.text, project_context)
        return Block(kind=kind, content=content, links=links)

    def render_inline(self, text: str, project_context: ProjectContext | None = None) -> tuple[str, list[LinkSpan]]:
        """Strip inline syntax from one line and locate its [[links]].

        Links are detected on the raw line before any other rule runs.

        Returns:
            Tuple of (content, links), link offsets into content.
        """
        if not text:
            return "", []

        links = self._links_for(text, project_context)
        content = reconcile(text, links, transform_structured)
        return content, links

    # ─────────────────────────────────────────────────────────────────────
    # HTML
    # ─────────────────────────────────────────────────────────────────────

    def render_to_html(
        self,
        markdown: str,
        project_context: ProjectContext | None = None,
        *,
        title: str | None = None,
    ) -> str:
        """Render markdown into a complete HTML document with embedded styles.

        Args:
            markdown: Raw markdown text.
            project_context: If given, unresolved [[links]] get an
                ``unresolved`` class and resolved ones target document ids.
            title: Content of the <title> element.

        Returns:
            The HTML document; the body is empty for empty input.
        """
        return render_document(self.render_html_body(markdown, project_context), title=title)

    def render_html_body(self, markdown: str, project_context: ProjectContext | None = None) -> str:
        """Render markdown into the HTML that goes inside <body>."""
        if not markdown:
            return ""

        body = _HtmlBody()
        for segment in segment_markdown(markdown, keep_empty_code_blocks=True):
            if segment.kind is SegmentKind.CODE_BLOCK:
                body.close_paragraph()
                body.append(self._code_block_html(segment))
            elif segment.kind is SegmentKind.HEADING:
                body.close_paragraph()
                level = segment.level
                body.append(f"<h{level}>{self.render_inline_html(segment.text, project_context)}</h{level}>")
            elif segment.kind is SegmentKind.LIST_ITEM:
                body.close_paragraph()
                body.open_list()
                body.append(f"<li>{self.render_inline_html(segment.text, project_context)}</li>")
            elif segment.kind is SegmentKind.BLANK:
                body.close_paragraph()
                body.close_list()
            else:
                body.paragraph_line(self.render_inline_html(segment.text, project_context))

        return body.finish()

    def render_inline_html(self, text: str, project_context: ProjectContext | None = None) -> str:
        """Escape one line and turn its inline syntax and [[links]] into HTML."""
        if not text:
            return ""

        links = self._links_for(text, project_context)

        def anchor(link: LinkSpan) -> str:
            css_class = "wikilink"
            if project_context is not None and not link.resolved:
                css_class = "wikilink unresolved"
            return (
                f'<a class="{css_class}" data-target="{escape_html(link.target_identifier)}">'
                f"{escape_html(link.display_text)}</a>"
            )

        protected, sentinels = protect_links(text, links)
        in_urls: set[str] = set()

        def url_text(url: str) -> str:
            # A [[link]] inside an href stays its escaped source text
            for sentinel, link in sentinels.items():
                if sentinel in url:
                    in_urls.add(sentinel)
                    url = url.replace(sentinel, escape_html(text[link.start_index : link.end_index]))
            return url

        html = transform_html(protected, url_text=url_text)
        remaining = {sentinel: link for sentinel, link in sentinels.items() if sentinel not in in_urls}
        return restore_links(html, remaining, render_link=anchor)

    @staticmethod
    def _code_block_html(segment: Segment) -> str:
        code = "\n".join(escape_html(line) for line in segment.lines)
        if segment.language:
            return f'<pre><code class="language-{escape_html(segment.language)}">{code}</code></pre>'
        return f"<pre><code>{code}</code></pre>"

    def _links_for(self, text: str, project_context: ProjectContext | None) -> list[LinkSpan]:
        links = self.link_service.detect_links(text)
        if links:
            self.link_service.resolve_links(links, project_context)
        return links


def render_to_blocks(
    markdown: str,
    project_context: ProjectContext | None = None,
    *,
    link_service: LinkService | None = None,
) -> list[Block]:
    """Render markdown to blocks with a fresh renderer."""
    return MarkdownRenderer(link_service).render_to_blocks(markdown, project_context)


def render_to_html(
    markdown: str,
    project_context: ProjectContext | None = None,
    *,
    title: str | None = None,
    link_service: LinkService | None = None,
) -> str:
    """Render markdown to a complete HTML document with a fresh renderer."""
    return MarkdownRenderer(link_service).render_to_html(markdown, project_context, title=title)
