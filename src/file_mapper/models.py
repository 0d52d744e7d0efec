"""Data models for the document source and its configuration."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class MermaidConfig:
    """Settings of the mermaid CLI renderer.

    Attributes:
        command: Executable of the mermaid CLI
        timeout: Seconds allowed for one render call
        scale: Puppeteer scale factor of the rendered PNG
        theme: Mermaid theme name
        background: Background colour of the rendered PNG
    """
    command: str = "mmdc"
    timeout: int = 60
    scale: int = 2
    theme: str = "default"
    background: str = "white"


@dataclass
class PublishConfig:
    """Publish configuration loaded from config.yaml.

    Attributes:
        confluence_base_url: Base URL of the Confluence site
        parent_page_id: Page every published page is created below
        local_path: Folder holding the markdown files
        exclude: Glob patterns (relative to local_path) to leave out
        max_workers: Upper bound of concurrent page operations
        mermaid: Mermaid renderer settings
    """
    confluence_base_url: str
    parent_page_id: str
    local_path: str
    exclude: List[str] = field(default_factory=list)
    max_workers: int = 10
    mermaid: MermaidConfig = field(default_factory=MermaidConfig)


@dataclass
class BinaryFile:
    """A binary file referenced from a document.

    Attributes:
        filename: Basename of the file
        file_path: Path relative to the vault root, with forward slashes
        contents: Raw bytes
    """
    filename: str
    file_path: str
    contents: bytes
