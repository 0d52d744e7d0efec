"""Confluence client library for publishing.

This package provides Python abstractions over the Confluence Cloud REST API,
covering the page, attachment, and label operations needed to publish ADF
documents into a page tree.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    AttachmentUploadError,
    ConversionError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "AttachmentUploadError",
    "ConversionError",
]
