"""scribo: markdown rendering with cross-document [[links]]."""

from .models import Block, BlockKind, Document, LinkSpan, ProjectContext
from .renderer import MarkdownRenderer, render_to_blocks, render_to_html

__version__ = "0.3.0"

__all__ = [
    "Block",
    "BlockKind",
    "Document",
    "LinkSpan",
    "ProjectContext",
    "MarkdownRenderer",
    "render_to_blocks",
    "render_to_html",
    "__version__",
]
