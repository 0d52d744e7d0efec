"""Maps Pandoc HTML output onto ADF nodes.

Block elements become ADF block nodes, inline formatting becomes text marks.
Images never sit inside paragraphs in ADF, so an image splits its
paragraph and is emitted as a ``mediaSingle`` block.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from src.adf.adf_models import AdfDocument, AdfMark, AdfNode

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

INLINE_MARKS = {
    "strong": "strong",
    "b": "strong",
    "em": "em",
    "i": "em",
    "del": "strike",
    "s": "strike",
    "u": "underline",
    "code": "code",
}

CONTAINER_TAGS = ["div", "section", "figure", "article", "main", "body", "html", "header", "footer"]

WHITESPACE_PATTERN = re.compile(r'\s+')


class HtmlToAdfConverter:
    """Converts an HTML fragment to an AdfDocument."""

    def __init__(self):
        self.parser = "lxml"

    def convert(self, html: str) -> AdfDocument:
        """Convert HTML to ADF.

        Args:
            html: HTML fragment as produced by Pandoc

        Returns:
            AdfDocument
        """
        soup = BeautifulSoup(html or "", self.parser)
        root = soup.find("body") or soup
        return AdfDocument(version=1, content=self._convert_blocks(root.children))

    # Blocks

    def _convert_blocks(self, elements) -> List[AdfNode]:
        blocks: List[AdfNode] = []
        pending_inline: List[AdfNode] = []

        def flush():
            if _has_visible_text(pending_inline):
                blocks.append(AdfNode(type="paragraph", content=_trim(list(pending_inline))))
            pending_inline.clear()

        for element in elements:
            if isinstance(element, Comment):
                continue
            if isinstance(element, NavigableString):
                pending_inline.extend(self._convert_inline(element, []))
                continue
            if not isinstance(element, Tag):
                continue

            if self._is_block(element):
                flush()
                blocks.extend(self._convert_block(element))
            elif element.name == "img":
                flush()
                media = self._convert_image(element)
                if media is not None:
                    blocks.append(media)
            else:
                pending_inline.extend(self._convert_inline(element, []))

        flush()
        return blocks

    def _is_block(self, element: Tag) -> bool:
        return element.name in HEADING_TAGS or element.name in (
            "p", "blockquote", "hr", "ul", "ol", "pre", "table", "figcaption", *CONTAINER_TAGS
        )

    def _convert_block(self, element: Tag) -> List[AdfNode]:
        name = element.name

        if name in HEADING_TAGS:
            return [AdfNode(
                type="heading",
                attrs={"level": int(name[1])},
                content=_trim(self._convert_inline_children(element, [])),
            )]

        if name in ("p", "figcaption"):
            return self._convert_paragraph(element)

        if name == "blockquote":
            return [AdfNode(type="blockquote", content=self._convert_blocks(element.children))]

        if name == "hr":
            return [AdfNode(type="rule")]

        if name in ("ul", "ol"):
            return [self._convert_list(element)]

        if name == "pre":
            return [self._convert_code_block(element)]

        if name == "table":
            return [self._convert_table(element)]

        return self._convert_blocks(element.children)

    def _convert_paragraph(self, element: Tag) -> List[AdfNode]:
        blocks: List[AdfNode] = []
        inline: List[AdfNode] = []
        for child in element.children:
            if isinstance(child, Tag) and child.name == "img":
                if _has_visible_text(inline):
                    blocks.append(AdfNode(type="paragraph", content=_trim(inline)))
                inline = []
                media = self._convert_image(child)
                if media is not None:
                    blocks.append(media)
            else:
                inline.extend(self._convert_inline(child, []))
        if _has_visible_text(inline):
            blocks.append(AdfNode(type="paragraph", content=_trim(inline)))
        return blocks

    def _convert_list(self, element: Tag) -> AdfNode:
        items = []
        for li in element.find_all("li", recursive=False):
            content = self._convert_blocks(li.children)
            if not content:
                content = [AdfNode(type="paragraph")]
            items.append(AdfNode(type="listItem", content=content))

        if element.name == "ol":
            start = element.get("start")
            attrs = {"order": int(start)} if start and str(start).isdigit() else {"order": 1}
            return AdfNode(type="orderedList", attrs=attrs, content=items)
        return AdfNode(type="bulletList", content=items)

    def _convert_code_block(self, element: Tag) -> AdfNode:
        code = element.find("code")
        language = _code_language(element) or (_code_language(code) if code is not None else None)
        code_text = (code or element).get_text()
        if code_text.endswith("\n"):
            code_text = code_text[:-1]

        attrs = {"language": language} if language else {}
        content = [AdfNode(type="text", text=code_text)] if code_text else []
        return AdfNode(type="codeBlock", attrs=attrs, content=content)

    def _convert_table(self, element: Tag) -> AdfNode:
        rows = []
        for tr in element.find_all("tr"):
            cells = []
            for cell in tr.find_all(["th", "td"], recursive=False):
                content = self._convert_blocks(cell.children) or [AdfNode(type="paragraph")]
                attrs = {}
                colspan = cell.get("colspan")
                if colspan and str(colspan).isdigit() and int(colspan) > 1:
                    attrs["colspan"] = int(colspan)
                cells.append(AdfNode(
                    type="tableHeader" if cell.name == "th" else "tableCell",
                    attrs=attrs,
                    content=content,
                ))
            if cells:
                rows.append(AdfNode(type="tableRow", content=cells))
        return AdfNode(type="table", attrs={"isNumberColumnEnabled": False, "layout": "default"}, content=rows)

    def _convert_image(self, element: Tag) -> Optional[AdfNode]:
        src = element.get("src")
        if not src:
            return None

        if src.startswith(FILE_SCHEME):
            attrs = {"type": "file", "url": FILE_SCHEME + unquote(src[len(FILE_SCHEME):])}
        else:
            attrs = {"type": "external", "url": src}

        alt = element.get("alt")
        if alt:
            attrs["alt"] = alt

        return AdfNode(
            type="mediaSingle",
            attrs={"layout": "center"},
            content=[AdfNode(type="media", attrs=attrs)],
        )

    # Inline

    def _convert_inline_children(self, element: Tag, marks: List[AdfMark]) -> List[AdfNode]:
        nodes: List[AdfNode] = []
        for child in element.children:
            nodes.extend(self._convert_inline(child, marks))
        return nodes

    def _convert_inline(self, element, marks: List[AdfMark]) -> List[AdfNode]:
        if isinstance(element, Comment):
            return []

        if isinstance(element, NavigableString):
            text = WHITESPACE_PATTERN.sub(" ", str(element))
            if not text:
                return []
            return [AdfNode(type="text", text=text, marks=[_copy_mark(m) for m in marks])]

        if not isinstance(element, Tag):
            return []

        name = element.name
        if name == "br":
            return [AdfNode(type="hardBreak")]

        if name == "img":
            # Images inside links or headings have no ADF inline form
            alt = element.get("alt")
            return [AdfNode(type="text", text=alt, marks=list(marks))] if alt else []

        if name == "a":
            href = element.get("href")
            if href:
                return self._convert_inline_children(
                    element, marks + [AdfMark(type="link", attrs={"href": href})]
                )
            return self._convert_inline_children(element, marks)

        if name in ("sub", "sup"):
            return self._convert_inline_children(
                element, marks + [AdfMark(type="subsup", attrs={"type": name})]
            )

        mark_type = INLINE_MARKS.get(name)
        if mark_type is not None:
            if name == "code":
                # Code text is taken verbatim
                return [AdfNode(
                    type="text",
                    text=element.get_text(),
                    marks=[_copy_mark(m) for m in marks] + [AdfMark(type="code")],
                )] if element.get_text() else []
            return self._convert_inline_children(element, marks + [AdfMark(type=mark_type)])

        return self._convert_inline_children(element, marks)


def _code_language(element: Tag) -> Optional[str]:
    for css_class in element.get("class") or []:
        if css_class.startswith("language-"):
            return css_class[len("language-"):]
        if css_class not in ("sourceCode", "numberSource", "number-lines"):
            return css_class
    return None


def _copy_mark(mark: AdfMark) -> AdfMark:
    return AdfMark(type=mark.type, attrs=dict(mark.attrs))


def _has_visible_text(nodes: List[AdfNode]) -> bool:
    for node in nodes:
        if node.type != "text" or (node.text and node.text.strip()):
            return True
    return False


def _trim(nodes: List[AdfNode]) -> List[AdfNode]:
    """Strip leading and trailing whitespace of an inline run."""
    while nodes and nodes[0].type == "text" and not (nodes[0].text or "").strip():
        nodes.pop(0)
    while nodes and nodes[-1].type == "text" and not (nodes[-1].text or "").strip():
        nodes.pop()
    if nodes and nodes[0].type == "text":
        nodes[0].text = nodes[0].text.lstrip()
    if nodes and nodes[-1].type == "text":
        nodes[-1].text = nodes[-1].text.rstrip()
    return nodes
