"""Content conversion module for markdown → ADF conversion.

This module provides the MarkdownConverter, which converts markdown with
Obsidian extensions to ADF using Pandoc and BeautifulSoup.
"""

from .markdown_converter import MarkdownConverter
from .html_to_adf import HtmlToAdfConverter
from .wikilinks import build_wikilink, parse_wikilink, is_wikilink

__all__ = [
    'MarkdownConverter',
    'HtmlToAdfConverter',
    'build_wikilink',
    'parse_wikilink',
    'is_wikilink',
]
