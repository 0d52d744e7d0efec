"""Markdown to ADF conversion using Pandoc.

Obsidian syntax (wikilinks and embeds) is rewritten into plain markdown
links first, Pandoc renders the markdown to HTML, and HtmlToAdfConverter
maps that HTML onto ADF nodes.
"""

import logging
import re
import subprocess
from typing import List
from urllib.parse import quote

from src.adf.adf_models import AdfDocument

from ..confluence_client.errors import ConversionError
from .html_to_adf import HtmlToAdfConverter
from .wikilinks import MARKDOWN_EXTENSION, build_wikilink

logger = logging.getLogger(__name__)

PANDOC_TIMEOUT = 10

IMAGE_EXTENSIONS = (
    '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.svg', '.webp', '.tif', '.tiff',
)

# ![[target|alias]] and [[target|alias]]
WIKILINK_PATTERN = re.compile(r'(!?)\[\[([^\]|]+)(?:\|([^\]]*))?\]\]')

# ![alt](target "title") with a local target
MARKDOWN_IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\(<?([^)\s>]+)>?(\s+"[^"]*")?\)')

# [text](other.md#heading) pointing at a local markdown file
MARKDOWN_LINK_PATTERN = re.compile(r'(?<!!)\[([^\]]*)\]\(<?([^)\s>]+\.md)(#[^)\s>]*)?>?\)')

FENCE_PATTERN = re.compile(r'^\s*(```|~~~)')

URL_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def _is_image(target: str) -> bool:
    return target.lower().endswith(IMAGE_EXTENSIONS)


def _file_url(path: str) -> str:
    return "file://" + quote(path)


def _strip_markdown_extension(path: str) -> str:
    if path.lower().endswith(MARKDOWN_EXTENSION):
        return path[:-len(MARKDOWN_EXTENSION)]
    return path


class MarkdownConverter:
    """Converts markdown (with Obsidian extensions) to ADF.

    One instance is created by the caller and passed to whatever needs it.

    Example:
        >>> converter = MarkdownConverter()
        >>> document = converter.markdown_to_adf("# Title\\n\\nSee [[Other Page]]")
    """

    def __init__(self):
        """Initialize MarkdownConverter and verify Pandoc is available.

        Raises:
            ConversionError: If Pandoc is not found on system PATH
        """
        if not self._pandoc_installed():
            raise ConversionError(
                "Pandoc not found. Install: brew install pandoc (macOS) or "
                "apt-get install pandoc (Linux) or download from "
                "https://pandoc.org/installing.html"
            )
        self.html_converter = HtmlToAdfConverter()

    def markdown_to_adf(self, markdown: str) -> AdfDocument:
        """Convert a markdown body (without frontmatter) to an ADF document.

        Raises:
            ConversionError: If Pandoc fails or times out
        """
        if not markdown or not markdown.strip():
            return AdfDocument()

        html = self.markdown_to_html(self.preprocess_obsidian(markdown))
        return self.html_converter.convert(html)

    def markdown_to_html(self, markdown: str) -> str:
        """Convert markdown to HTML using Pandoc.

        Raises:
            ConversionError: If conversion fails or times out
        """
        if not markdown:
            return ""

        try:
            result = subprocess.run(
                ["pandoc", "-f", "markdown-implicit_figures", "-t", "html", "--no-highlight"],
                input=markdown,
                text=True,
                capture_output=True,
                check=True,
                timeout=PANDOC_TIMEOUT
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise ConversionError(f"Pandoc conversion failed: {e.stderr}")
        except subprocess.TimeoutExpired:
            raise ConversionError(f"Pandoc conversion timed out (>{PANDOC_TIMEOUT}s)")

    def preprocess_obsidian(self, markdown: str) -> str:
        """Rewrite Obsidian links and embeds into standard markdown.

        - ``![[image.png]]`` becomes ``![](file://image.png)``
        - ``[[Page#Heading|Alias]]`` becomes ``[Alias](wikilink://Page#Heading)``
        - local image and ``.md`` link targets get the file/wikilink schemes

        Fenced code blocks are left untouched.
        """
        lines: List[str] = []
        fence = None
        for line in markdown.split('\n'):
            match = FENCE_PATTERN.match(line)
            if fence is not None:
                if match and match.group(1) == fence:
                    fence = None
                lines.append(line)
                continue
            if match:
                fence = match.group(1)
                lines.append(line)
                continue
            lines.append(self._rewrite_line(line))
        return '\n'.join(lines)

    def _rewrite_line(self, line: str) -> str:
        line = WIKILINK_PATTERN.sub(self._replace_wikilink, line)
        line = MARKDOWN_IMAGE_PATTERN.sub(self._replace_image, line)
        return MARKDOWN_LINK_PATTERN.sub(self._replace_markdown_link, line)

    def _replace_wikilink(self, match: 're.Match') -> str:
        embed, target, alias = match.group(1), match.group(2).strip(), match.group(3)

        if embed and _is_image(target):
            return f"![]({_file_url(target)})"

        page, _, heading = target.partition('#')
        page = _strip_markdown_extension(page.strip())
        if not page:
            # Link to a heading on the same page
            return alias or heading

        label = alias if alias else target
        href = build_wikilink(page, heading or None)
        return f"[{label}]({href})"

    def _replace_image(self, match: 're.Match') -> str:
        alt, target = match.group(1), match.group(2)
        if URL_SCHEME_PATTERN.match(target):
            return match.group(0)
        return f"![{alt}]({_file_url(target)})"

    def _replace_markdown_link(self, match: 're.Match') -> str:
        text, target, heading = match.group(1), match.group(2), match.group(3)
        if URL_SCHEME_PATTERN.match(target):
            return match.group(0)
        page = _strip_markdown_extension(target)
        return f"[{text}]({build_wikilink(page, heading[1:] if heading else None)})"

    def _pandoc_installed(self) -> bool:
        """Check if Pandoc is installed on system PATH."""
        try:
            result = subprocess.run(
                ["which", "pandoc"],
                capture_output=True,
                timeout=5
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
