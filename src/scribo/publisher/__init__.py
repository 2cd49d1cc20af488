"""HTML export."""

from .templates import DOCUMENT_TEMPLATE, render_document

__all__ = ["DOCUMENT_TEMPLATE", "render_document"]
