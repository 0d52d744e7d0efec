"""YAML frontmatter parsing and rewriting for markdown files.

Frontmatter drives how a document is published:

- ``title``: page title (falls back to the first H1, then the file stem)
- ``tags``: page labels
- ``confluence_url``: the page this file was published to
- ``confluence_keep_parent``: never move the page when updating it
- ``confluence_publish: false``: leave the file out
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

from src.confluence_client.urls import build_page_url, parse_page_url

from .errors import FrontmatterError


class FrontmatterHandler:
    """Handles YAML frontmatter operations for markdown files.

    When a file's frontmatter is rewritten, every existing user field is
    preserved and confluence_url is added/updated as the first field.
    """

    # Regex pattern to match YAML frontmatter (between --- delimiters)
    FRONTMATTER_PATTERN = re.compile(
        r'^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|$)',
        re.DOTALL
    )

    # First ATX level-1 heading of the body
    H1_PATTERN = re.compile(r'^#\s+(.+?)\s*#*\s*$', re.MULTILINE)

    TAG_SPLIT_PATTERN = re.compile(r'[,\s]+')

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj, current_depth: int = 0, max_depth: int = MAX_YAML_DEPTH) -> None:
        """Validate that YAML structure depth doesn't exceed maximum.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > max_depth:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {max_depth}"
            )

        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1, max_depth)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1, max_depth)

    @classmethod
    def build_confluence_url(cls, base_url: str, space_key: str, page_id: str) -> str:
        """Build the confluence_url value for a page."""
        return build_page_url(base_url, space_key, page_id)

    @classmethod
    def parse_confluence_url(cls, url: str) -> Tuple[Optional[str], Optional[str]]:
        """Extract (space_key, page_id) from a Confluence URL, or (None, None)."""
        return parse_page_url(url)

    @classmethod
    def parse(cls, file_path: str, content: str) -> Tuple[Dict[str, Any], str]:
        """Split markdown content into its frontmatter and body.

        Args:
            file_path: Path to the file (for error messages)
            content: Full markdown content including frontmatter

        Returns:
            Tuple of (frontmatter_dict, markdown_body).
            Returns ({}, content) if there is no frontmatter.

        Raises:
            FrontmatterError: If frontmatter is malformed or has invalid YAML
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        frontmatter_str = match.group(1) or ""
        markdown_content = content[match.end():]

        try:
            frontmatter = yaml.safe_load(frontmatter_str)
        except yaml.YAMLError as e:
            raise FrontmatterError(
                file_path,
                f"Invalid YAML syntax: {str(e)}"
            )

        if frontmatter is None:
            return {}, markdown_content

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message)

        return frontmatter, markdown_content

    @classmethod
    def get_page_id(cls, frontmatter: Dict[str, Any]) -> Optional[str]:
        """Page ID stored in confluence_url, or None."""
        url = frontmatter.get('confluence_url')
        if not url:
            return None
        _, page_id = cls.parse_confluence_url(str(url))
        return page_id

    @classmethod
    def get_title(cls, frontmatter: Dict[str, Any], body: str, fallback: str) -> str:
        """Page title: frontmatter title, then first H1, then ``fallback``."""
        title = frontmatter.get('title')
        if title is not None and str(title).strip():
            return str(title).strip()

        match = cls.H1_PATTERN.search(body)
        if match:
            return match.group(1)

        return fallback

    @classmethod
    def get_tags(cls, frontmatter: Dict[str, Any]) -> List[str]:
        """Labels from frontmatter ``tags`` (a list or a comma/space separated string).

        Tags are lowercased, as Confluence stores labels.
        """
        raw = frontmatter.get('tags')
        if raw is None:
            return []
        if isinstance(raw, str):
            items = cls.TAG_SPLIT_PATTERN.split(raw)
        elif isinstance(raw, list):
            items = [str(item) for item in raw if item is not None]
        else:
            items = [str(raw)]

        tags: List[str] = []
        for item in items:
            tag = item.strip().lstrip('#').lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @classmethod
    def is_publishable(cls, frontmatter: Dict[str, Any]) -> bool:
        return frontmatter.get('confluence_publish', True) is not False

    @classmethod
    def keeps_parent(cls, frontmatter: Dict[str, Any]) -> bool:
        return bool(frontmatter.get('confluence_keep_parent', False))

    @classmethod
    def set_confluence_url(cls, file_path: str, content: str, confluence_url: str) -> str:
        """Return ``content`` with confluence_url set as the first frontmatter field.

        Raises:
            FrontmatterError: If the existing frontmatter cannot be parsed
        """
        existing_frontmatter, body = cls.parse(file_path, content)
        existing_frontmatter.pop('confluence_url', None)

        final_frontmatter = {'confluence_url': confluence_url, **existing_frontmatter}

        yaml_str = yaml.safe_dump(
            final_frontmatter,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        return f"---\n{yaml_str}---\n{body}"
