"""HTML document template for exported markdown.

Uses Jinja2 with an inline template definition. The body is produced by the
HTML renderer and passed in as markup so it is not escaped twice.
"""

from __future__ import annotations

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup

from ..config import DEFAULT_DOCUMENT_TITLE, get_stylesheet

# <body> stays on one line so an empty document renders as <body></body>
DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>
{{ stylesheet }}</style>
</head>
<body>{{ body }}</body>
</html>
"""


def _get_env() -> Environment:
    """Create Jinja2 environment with autoescape enabled."""
    return Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(default=True, default_for_string=True),
        keep_trailing_newline=True,
    )


def render_document(body: str, title: str | None = None, stylesheet: str | None = None) -> str:
    """Wrap rendered HTML in a complete, self-contained document.

    Args:
        body: HTML for the <body> element, already escaped.
        title: Document title, escaped here. Defaults to DEFAULT_DOCUMENT_TITLE.
        stylesheet: CSS for the <style> element. Defaults to get_stylesheet().

    Returns:
        Complete HTML page string
    """
    tmpl = _get_env().from_string(DOCUMENT_TEMPLATE)
    return tmpl.render(
        title=title or DEFAULT_DOCUMENT_TITLE,
        # CSS and body are trusted output, mark safe to prevent escaping
        stylesheet=Markup(stylesheet if stylesheet is not None else get_stylesheet()),
        body=Markup(body),
    )
