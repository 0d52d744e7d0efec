"""Data models for the publish reconciliation engine.

All models use dataclasses. SourceDocument is produced by the document
source adaptor and is updated in place as its remote page identity is
resolved; everything else lives only for the duration of one publish run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.adf.adf_models import AdfDocument


@dataclass
class SourceDocument:
    """A local markdown document converted to ADF.

    Attributes:
        folder_name: Name of the folder holding the document
        absolute_file_path: Absolute path of the markdown file
        file_name: Basename of the file (unique across a publish run)
        contents: Converted ADF body
        page_title: Title of the Confluence page
        frontmatter: Parsed YAML frontmatter
        tags: Labels the page should carry
        page_id: Confluence page ID stored from a previous run (None if never published)
        dont_change_parent_page_id: If True, updates never move the page
        space_key: Space key, filled in once the page is resolved
    """
    folder_name: str
    absolute_file_path: str
    file_name: str
    contents: AdfDocument
    page_title: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    page_id: Optional[str] = None
    dont_change_parent_page_id: bool = False
    space_key: Optional[str] = None


@dataclass
class TreeNode:
    """A folder-tree vertex.

    Attributes:
        name: Folder or file name of this vertex
        children: Child vertices, uniquely named
        file: Document for this vertex (a folder's index document or a placeholder)
    """
    name: str
    children: List['TreeNode'] = field(default_factory=list)
    file: Optional[SourceDocument] = None


@dataclass
class PageDetails:
    """Remote page resolved for a document by ensure_page_exists."""
    id: str
    version: int
    existing_adf: str
    space_key: str


@dataclass
class ConfluenceTreeNode:
    """A TreeNode paired with its remote page state."""
    file: SourceDocument
    version: int
    existing_adf: str
    children: List['ConfluenceTreeNode'] = field(default_factory=list)


@dataclass
class RemotePageBinding:
    """A document ready to publish: remote version, stored body, and parent.

    Attributes:
        file: The document (page_id and space_key are resolved)
        version: Current remote version number
        existing_adf: Serialized ADF body currently stored on Confluence
        parent_page_id: Page ID the page should sit under
    """
    file: SourceDocument
    version: int
    existing_adf: str
    parent_page_id: str


@dataclass
class AttachmentRecord:
    """An attachment already on the page, keyed by its title.

    Attributes:
        file_hash: Content fingerprint stored in the attachment comment
        attachment_id: Media file ID of the attachment
        collection_name: Media collection the attachment lives in
    """
    file_hash: Optional[str]
    attachment_id: Optional[str]
    collection_name: Optional[str]


@dataclass
class UploadResult:
    """A binary that is available on the page as an attachment."""
    filename: str
    attachment_id: str
    collection_name: str


@dataclass
class FilePublishResult:
    """Outcome of publishing a single page."""
    successful_upload: bool
    absolute_file_path: str
    reason: Optional[str] = None


@dataclass
class PublishFailure:
    """A page that failed to publish."""
    file_name: str
    reason: str


@dataclass
class PublishOutcome:
    """Summary of a publish run.

    Attributes:
        successful_uploads: Number of pages published (updated or unchanged)
        failed_files: Pages that failed, with a human-readable reason
    """
    successful_uploads: int = 0
    failed_files: List[PublishFailure] = field(default_factory=list)
