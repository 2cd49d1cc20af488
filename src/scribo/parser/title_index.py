"""Title-to-document index for resolving wiki-style links.

Resolves [[Title]], [[Alias]] and [[path/to/entry]] style links against the
documents of a ProjectContext.
"""

from __future__ import annotations

import logging

from ..config import partial_title_match_enabled
from ..models import LinkSpan, ProjectContext
from .links import detect_links, normalize_link

log = logging.getLogger(__name__)


def build_title_index(project: ProjectContext) -> dict[str, str]:
    """Build an index mapping titles and aliases to document ids.

    Keys are lowercase for case-insensitive lookup. The first document to
    claim a title or alias keeps it.

    Args:
        project: Project whose documents are indexed.

    Returns:
        Dict mapping lowercase title/alias to document id.
    """
    title_index: dict[str, str] = {}

    for document in project.documents:
        title_key = document.title.lower().strip()
        if title_key and title_key not in title_index:
            title_index[title_key] = document.id

        for alias in document.aliases:
            alias_key = alias.lower().strip()
            if alias_key and alias_key not in title_index:
                title_index[alias_key] = document.id

    return title_index


def resolve_link_target(
    target: str,
    title_index: dict[str, str],
    project: ProjectContext,
    partial_match: bool = True,
) -> str | None:
    """Resolve a link target to a document id.

    Attempts resolution in order:
    1. Title/alias lookup (case-insensitive)
    2. Document id or path match, then path suffix ([[entry]] -> notes/entry)
    3. Partial title match (title contains the target), if enabled

    Args:
        target: The link target from [[target]].
        title_index: Title/alias to document id mapping.
        project: Project the index was built from.
        partial_match: Allow step 3.

    Returns:
        Document id or None if not resolvable.
    """
    lookup_key = target.strip().lower()
    if not lookup_key:
        return None

    if lookup_key in title_index:
        return title_index[lookup_key]

    normalized = normalize_link(target).lower()
    if normalized:
        for document in project.documents:
            if normalized == document.id.lower() or normalized == (document.path or "").lower():
                return document.id

        for document in project.documents:
            path = (document.path or document.id).lower()
            if path.endswith(f"/{normalized}"):
                return document.id

    if partial_match:
        for document in project.documents:
            if lookup_key in document.title.lower():
                return document.id

    return None


class DocumentLinkService:
    """Default link collaborator: regex detection plus title index resolution.

    Holds no per-project state; the index is rebuilt for every resolve call,
    so one instance can serve concurrent renders.
    """

    def __init__(self, partial_match: bool | None = None) -> None:
        self.partial_match = partial_title_match_enabled() if partial_match is None else partial_match

    def detect_links(self, text: str) -> list[LinkSpan]:
        return detect_links(text)

    def resolve_links(self, links: list[LinkSpan], project_context: ProjectContext | None) -> None:
        """Mark links that match a document as resolved.

        A resolved link gets the document id as its target_identifier.
        Without a project every link stays unresolved.
        """
        if project_context is None or not links:
            return

        title_index = build_title_index(project_context)
        for link in links:
            document_id = resolve_link_target(
                link.link_text or link.target_identifier,
                title_index,
                project_context,
                partial_match=self.partial_match,
            )
            if document_id is None:
                log.debug("Unresolved link [[%s]]", link.target_identifier)
                continue
            link.target_identifier = document_id
            link.resolved = True
