"""Read-only project loading for link resolution.

Builds a ProjectContext from a directory of markdown files, taking titles,
aliases and ids from YAML frontmatter where present.
"""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter

from .errors import ProjectLoadError
from .models import Document, ProjectContext

log = logging.getLogger(__name__)


def load_project(root: Path, name: str | None = None) -> ProjectContext:
    """Load every markdown document under root.

    - ``id`` frontmatter, else the path relative to root without .md
    - ``title`` frontmatter, else the file stem
    - ``aliases`` frontmatter list, if any

    Files starting with ``_`` are skipped, as are files whose frontmatter
    cannot be parsed.

    Args:
        root: Project directory.
        name: Project name, defaults to the directory name.

    Returns:
        ProjectContext with documents in path order.

    Raises:
        ProjectLoadError: If root is not a directory.
    """
    if not root.exists() or not root.is_dir():
        raise ProjectLoadError(f"Project directory not found: {root}", {"path": str(root)})

    documents: list[Document] = []

    for md_file in sorted(root.rglob("*.md")):
        if md_file.name.startswith("_"):
            continue

        try:
            post = frontmatter.load(str(md_file))
        except Exception as e:
            log.debug("Skipping %s during project load: %s", md_file, e)
            continue

        rel_path = md_file.relative_to(root).with_suffix("").as_posix()
        metadata = post.metadata or {}

        aliases = metadata.get("aliases", [])
        if not isinstance(aliases, list):
            aliases = []

        documents.append(
            Document(
                id=str(metadata.get("id") or rel_path),
                title=str(metadata.get("title") or md_file.stem),
                aliases=[str(alias) for alias in aliases if alias],
                path=rel_path,
            )
        )

    log.debug("Loaded %d documents from %s", len(documents), root)
    return ProjectContext(name=name or root.name, documents=documents)
