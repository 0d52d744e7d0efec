"""Rewrites links between published documents into Confluence links.

The converter marks internal references with the ``wikilink:`` scheme, e.g.
``wikilink://Some%20Page#Heading``. Once every document has a page ID, each
such link is pointed at the target page's URL. A link whose visible text is
the bare page name becomes an inline card. A link to a document outside the
published set loses its link mark and stays as plain text.
"""

import logging
from typing import Dict, List, Optional

from src.adf.adf_models import AdfDocument, AdfMark, AdfNode
from src.adf.traverse import transform
from src.confluence_client.urls import build_page_url
from src.content_converter.wikilinks import is_wikilink, page_file_name, parse_wikilink

from .models import SourceDocument

logger = logging.getLogger(__name__)


class LinkResolver:
    """Resolves internal links against the set of published documents.

    Example:
        >>> resolver = LinkResolver("https://example.atlassian.net")
        >>> body = resolver.resolve_links(document.contents, file_map)
    """

    def __init__(self, confluence_base_url: str):
        self.confluence_base_url = confluence_base_url

    def page_url(self, target: SourceDocument, fragment: str = "") -> str:
        """Absolute URL of a resolved document's page."""
        return build_page_url(
            self.confluence_base_url,
            target.space_key or "",
            target.page_id or "",
        ) + fragment

    def resolve_links(
        self,
        document: AdfDocument,
        file_map: Dict[str, SourceDocument],
    ) -> AdfDocument:
        """Return a copy of ``document`` with internal links resolved.

        Args:
            document: Converted document body
            file_map: Published documents keyed by file name

        Returns:
            New AdfDocument
        """
        def visit_text(node: AdfNode) -> Optional[AdfNode]:
            link = node.find_mark("link")
            if link is None or not is_wikilink(link.attrs.get("href")):
                return None
            return self._resolve_text_node(node, link, file_map)

        return transform(document, {"text": visit_text})

    def _resolve_text_node(
        self,
        node: AdfNode,
        link: AdfMark,
        file_map: Dict[str, SourceDocument],
    ) -> AdfNode:
        page_path, fragment = parse_wikilink(link.attrs["href"])
        target = file_map.get(page_file_name(page_path))

        if target is None:
            logger.warning(f"Link target '{page_path}' is not published, keeping plain text")
            return AdfNode(
                type="text",
                text=node.text,
                marks=[_copy_mark(mark) for mark in node.marks if mark is not link],
            )

        url = self.page_url(target, fragment)
        logger.debug(f"Resolved link '{page_path}' to {url}")

        if node.text == page_path:
            return AdfNode(type="inlineCard", attrs={"url": url})

        marks: List[AdfMark] = []
        for mark in node.marks:
            if mark is link:
                marks.append(AdfMark(type="link", attrs={**mark.attrs, "href": url}))
            else:
                marks.append(_copy_mark(mark))
        return AdfNode(type="text", text=node.text, marks=marks)


def _copy_mark(mark: AdfMark) -> AdfMark:
    return AdfMark(type=mark.type, attrs=dict(mark.attrs))
