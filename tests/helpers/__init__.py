"""Test helpers: in-memory Confluence and document source fakes."""

from .fake_confluence import FakeConfluence, FakeDocumentSource

__all__ = [
    'FakeConfluence',
    'FakeDocumentSource',
]
