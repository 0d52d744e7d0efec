"""Typed exception hierarchy for publish errors.

Errors raised while building or reconciling the page tree abort the whole
publish run. Errors raised while publishing a single page are caught by the
Publisher and reported per page.
"""

from src.confluence_client.errors import SyncError


class PublisherError(SyncError):
    """Base exception for all publisher errors."""
    pass


class DuplicateFileNameError(PublisherError):
    """Raised when two documents share a file name anywhere in the tree."""

    def __init__(self, file_name: str):
        super().__init__(
            f'File name "{file_name}" is not unique across all folders.'
        )
        self.file_name = file_name


class MissingSpaceKeyError(PublisherError):
    """Raised when a page's space cannot be determined."""

    def __init__(self, page_id: str):
        super().__init__(f"Missing space key for page {page_id}")
        self.page_id = page_id


class MissingPageIdError(PublisherError):
    """Raised when a document has no remote page after reconciliation."""

    def __init__(self, absolute_file_path: str):
        super().__init__(f"Missing page ID for {absolute_file_path}")
        self.absolute_file_path = absolute_file_path


class PageOutsideTreeError(PublisherError):
    """Raised when a title match lies outside the managed page tree.

    Adopting such a page would overwrite content the publisher does not own.
    """

    def __init__(self, page_title: str, page_id: str, top_page_id: str):
        super().__init__(
            f"{page_title} is trying to overwrite a page outside the page tree "
            f"from the selected top page (page {page_id} is not below {top_page_id})"
        )
        self.page_title = page_title
        self.page_id = page_id
        self.top_page_id = top_page_id
