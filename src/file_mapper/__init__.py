"""Document source for publishing a local folder of markdown files.

This package reads markdown files with YAML frontmatter, converts them to
ADF, resolves the binaries they reference, and stores each file's Confluence
page URL back into its frontmatter.
"""

from .file_mapper import FileMapper
from .models import BinaryFile, MermaidConfig, PublishConfig
from .errors import (
    FileMapperError,
    FilesystemError,
    ConfigError,
    FrontmatterError,
)
from .config_loader import ConfigLoader
from .frontmatter_handler import FrontmatterHandler

__all__ = [
    'FileMapper',
    'BinaryFile',
    'MermaidConfig',
    'PublishConfig',
    'FileMapperError',
    'FilesystemError',
    'ConfigError',
    'FrontmatterError',
    'ConfigLoader',
    'FrontmatterHandler',
]
