"""The ``wikilink:`` link scheme used for links between local documents.

The converter emits these targets; the publisher's LinkResolver replaces them
with page URLs once every document has a Confluence page.
"""

import posixpath
from typing import Optional, Tuple
from urllib.parse import quote, unquote

WIKILINK_SCHEME = "wikilink:"

MARKDOWN_EXTENSION = ".md"


def build_wikilink(page_path: str, fragment: Optional[str] = None) -> str:
    """Build the internal link target for a document path and optional heading."""
    href = WIKILINK_SCHEME + "//" + quote(page_path)
    if fragment:
        href += "#" + quote(fragment)
    return href


def is_wikilink(href: object) -> bool:
    return isinstance(href, str) and href.startswith(WIKILINK_SCHEME)


def parse_wikilink(href: str) -> Tuple[str, str]:
    """Split an internal link target into ``(page_path, fragment)``.

    The fragment keeps its leading ``#`` (empty string if absent).
    """
    target = href[len(WIKILINK_SCHEME):]
    if target.startswith("//"):
        target = target[2:]
    path, _, fragment = target.partition("#")
    return unquote(path), f"#{fragment}" if fragment else ""


def page_file_name(page_path: str) -> str:
    """File name a link path refers to (file names are unique per run)."""
    name = posixpath.basename(page_path)
    if not name.endswith(MARKDOWN_EXTENSION):
        name += MARKDOWN_EXTENSION
    return name
