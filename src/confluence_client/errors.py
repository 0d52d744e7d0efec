"""Typed exception hierarchy for Confluence-related errors.

This module defines all custom exceptions used by the Confluence client library.
All exceptions inherit from ConfluenceError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all confluence-publish errors.

    Use this to catch any application-level error from the publish tool.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are invalid or authentication fails."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(
        self,
        message: str = "Confluence API failure (after 3 retries)",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.status_code = status_code


class AttachmentUploadError(ConfluenceError):
    """Raised when an attachment upload returns no usable attachment record."""

    def __init__(self, page_id: str, filename: str, reason: Optional[str] = None):
        message = f"Attachment upload of '{filename}' to page {page_id} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.page_id = page_id
        self.filename = filename


class ConversionError(ConfluenceError):
    """Raised when content conversion between formats fails."""

    def __init__(self, message: str):
        super().__init__(message)
