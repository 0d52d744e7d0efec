"""Root pytest configuration.

Unit tests never talk to a Confluence instance: the API is either mocked or
replaced by tests.helpers.FakeConfluence.
"""

import logging

import pytest

# atlassian-python-api logs expected 404s at ERROR level.
logging.getLogger("atlassian").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def no_real_credentials(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    for name in ("CONFLUENCE_URL", "CONFLUENCE_USER", "CONFLUENCE_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)
