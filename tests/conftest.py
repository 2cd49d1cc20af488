"""Shared test fixtures for the scribo test suite.

Design:
- renderer: default MarkdownRenderer
- project: in-memory ProjectContext with a few titled documents
- project_dir: the same project as markdown files on disk
- runner: CliRunner for CLI tests
"""

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from scribo.models import Document, ProjectContext
from scribo.renderer import MarkdownRenderer

# Markdown that must render without raising, in both pipelines
MALFORMED_INPUTS = [
    "```",
    "```\n```\n```",
    "**unclosed bold",
    "*",
    "_",
    "_*x*_",
    "[[",
    "]]",
    "[[a|",
    "[[]]",
    "[[[[nested]]]]",
    "[text](",
    "[docs]([[Guide]])",
    "[[[x]]](y)",
    "- ",
    "# ",
    "####",
    "\r\r\n\n",
    "`",
    "[[a]]**[[b]]**_[[c]]_",
    " [[x]]",
]

# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() from CLI tests so caplog sees scribo records."""
    yield
    logger = logging.getLogger("scribo")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def renderer() -> MarkdownRenderer:
    """Renderer with the default link service."""
    return MarkdownRenderer()


@pytest.fixture
def project() -> ProjectContext:
    """Small novel project: a place and two characters."""
    return ProjectContext(
        name="novel",
        documents=[
            Document(id="doc-harbor", title="The Harbor", aliases=["Port"], path="places/harbor"),
            Document(id="doc-reyes", title="Captain Reyes", path="characters/reyes"),
            Document(id="doc-mira", title="Mira", aliases=["The Navigator"], path="characters/mira"),
        ],
    )


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


def write_markdown(root: Path, rel_path: str, content: str, title: str | None = None, **metadata) -> Path:
    """Helper to create a markdown file with optional frontmatter."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)

    if title or metadata:
        header = ["---"]
        if title:
            header.append(f"title: {title}")
        for key, value in metadata.items():
            if isinstance(value, list):
                header.append(f"{key}:")
                header.extend(f"  - {item}" for item in value)
            else:
                header.append(f"{key}: {value}")
        header.append("---")
        content = "\n".join(header) + "\n\n" + content

    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project directory with frontmatter titles, one alias and one draft."""
    root = tmp_path / "book"
    root.mkdir()
    write_markdown(root, "places/harbor.md", "Salt and rope.", title="The Harbor", aliases=["Port"])
    write_markdown(root, "characters/reyes.md", "Captain of the Gull.", title="Captain Reyes")
    write_markdown(root, "chapter-one.md", "# Chapter One\n\nReyes walks to [[Port]].")
    write_markdown(root, "_draft.md", "Not part of the project.", title="Draft")
    return root
