"""Pydantic models for rendered markdown and the project it links into."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BlockKind(str, Enum):
    """Kind of a rendered block."""

    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    HEADING4 = "heading4"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "code_block"

    @classmethod
    def heading(cls, level: int) -> "BlockKind":
        """Block kind for a heading of the given level (1-4)."""
        return _HEADING_KINDS[level]

    @property
    def heading_level(self) -> int | None:
        """1-4 for headings, None for every other kind."""
        for level, kind in _HEADING_KINDS.items():
            if kind is self:
                return level
        return None


_HEADING_KINDS = {
    1: BlockKind.HEADING1,
    2: BlockKind.HEADING2,
    3: BlockKind.HEADING3,
    4: BlockKind.HEADING4,
}


class LinkSpan(BaseModel):
    """A [[double-bracket]] reference located inside a block's text.

    Offsets index into the block's final content once rendering is done;
    right after detection they index into the raw line.
    """

    start_index: int = Field(ge=0)
    length: int = Field(gt=0)
    display_text: str
    target_identifier: str  # Document id once resolved, the written target otherwise
    link_text: str = ""  # Target exactly as written between the brackets
    resolved: bool = False

    @property
    def end_index(self) -> int:
        return self.start_index + self.length


class Block(BaseModel):
    """One rendered unit: a heading, list item, paragraph or code block."""

    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    content: str = ""
    links: list[LinkSpan] = Field(default_factory=list)
    language: str | None = None  # Fence info string, code blocks only


class Document(BaseModel):
    """A document of a project that links can resolve to."""

    id: str
    title: str
    aliases: list[str] = Field(default_factory=list)
    path: str | None = None  # Relative path without .md


class ProjectContext(BaseModel):
    """The set of documents [[links]] are resolved against."""

    name: str = ""
    documents: list[Document] = Field(default_factory=list)

    def get(self, document_id: str) -> Document | None:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None
