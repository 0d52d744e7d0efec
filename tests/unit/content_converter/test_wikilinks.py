"""Unit tests for content_converter.wikilinks module."""

import pytest
from src.content_converter.wikilinks import build_wikilink, is_wikilink, page_file_name, parse_wikilink


class TestWikilinks:
    """Test cases for the internal link scheme."""

    def test_build_and_parse(self):
        """Paths and headings survive a build/parse cycle."""
        href = build_wikilink("folder/My Page", "Set up")

        assert href == "wikilink://folder/My%20Page#Set%20up"
        assert parse_wikilink(href) == ("folder/My Page", "#Set%20up")

    def test_parse_without_fragment(self):
        """A link without heading has an empty fragment."""
        assert parse_wikilink("wikilink://Page") == ("Page", "")

    @pytest.mark.parametrize("href, expected", [
        ("wikilink://Page", True),
        ("https://example.com", False),
        (None, False),
    ])
    def test_is_wikilink(self, href, expected):
        """Only wikilink: targets are internal links."""
        assert is_wikilink(href) is expected

    @pytest.mark.parametrize("path, expected", [
        ("Page", "Page.md"),
        ("folder/Page", "Page.md"),
        ("Page.md", "Page.md"),
    ])
    def test_page_file_name(self, path, expected):
        """Links resolve by file name."""
        assert page_file_name(path) == expected
