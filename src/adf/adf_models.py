"""Data models for ADF (Atlassian Document Format) documents.

ADF is Confluence's JSON-based document format. A document is a tree of typed
nodes; text nodes carry marks (strong, em, link, ...), media nodes reference
attachments, and code blocks carry a language attribute.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AdfNodeType(Enum):
    """Types of ADF nodes."""

    # Document root
    DOC = "doc"

    # Block nodes
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_HEADER = "tableHeader"
    TABLE_CELL = "tableCell"
    CODE_BLOCK = "codeBlock"
    BLOCKQUOTE = "blockquote"
    RULE = "rule"
    MEDIA_SINGLE = "mediaSingle"
    MEDIA_GROUP = "mediaGroup"
    MEDIA = "media"
    PANEL = "panel"
    EXPAND = "expand"

    # Inline nodes
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    INLINE_CARD = "inlineCard"

    # Extensions (macros)
    EXTENSION = "extension"

    # Other
    UNKNOWN = "unknown"


@dataclass
class AdfMark:
    """Represents a text mark (formatting) in ADF.

    Attributes:
        type: Mark type (strong, em, link, code, strike, ...)
        attrs: Mark-specific attributes (e.g. ``href`` for links)
    """

    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.attrs:
            result["attrs"] = self.attrs
        return result


@dataclass
class AdfNode:
    """Represents a node in the ADF tree.

    Attributes:
        type: Node type (paragraph, heading, text, media, ...)
        content: List of child nodes
        text: Text content (for text nodes)
        attrs: Node attributes
        marks: Text formatting marks
    """

    type: str
    content: List["AdfNode"] = field(default_factory=list)
    text: Optional[str] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    marks: List[AdfMark] = field(default_factory=list)

    @property
    def node_type(self) -> AdfNodeType:
        """Get the AdfNodeType enum value."""
        try:
            return AdfNodeType(self.type)
        except ValueError:
            return AdfNodeType.UNKNOWN

    def find_mark(self, mark_type: str) -> Optional[AdfMark]:
        """Return the first mark of the given type, or None."""
        for mark in self.marks:
            if mark.type == mark_type:
                return mark
        return None

    def get_text_content(self) -> str:
        """Concatenate all text in this node's subtree."""
        if self.text is not None:
            return self.text
        return "".join(child.get_text_content() for child in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert this node back to ADF JSON format.

        Keys are emitted in a fixed order so that serialization is stable
        across runs.
        """
        result: Dict[str, Any] = {"type": self.type}

        if self.attrs:
            result["attrs"] = self.attrs

        if self.content:
            result["content"] = [child.to_dict() for child in self.content]

        if self.text is not None:
            result["text"] = self.text

        if self.marks:
            result["marks"] = [mark.to_dict() for mark in self.marks]

        return result


@dataclass
class AdfDocument:
    """Represents a complete ADF document.

    Attributes:
        version: ADF schema version (usually 1)
        content: List of top-level block nodes
    """

    version: int = 1
    content: List[AdfNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the document to ADF JSON format."""
        return {
            "type": "doc",
            "version": self.version,
            "content": [node.to_dict() for node in self.content],
        }
