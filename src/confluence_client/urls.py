"""Confluence page URL helpers."""

import re
from typing import Optional, Tuple

# https://domain.atlassian.net/wiki/spaces/{space-key}/pages/{page-id}[/{title}]
PAGE_URL_PATTERN = re.compile(
    r'https?://[^/]+(?:/.*)?/spaces/([^/]+)/pages/(\d+)(?:[/#?].*)?$'
)


def build_page_url(base_url: str, space_key: str, page_id: str) -> str:
    """Build a Confluence page URL from components.

    Args:
        base_url: Confluence base URL, with or without the ``/wiki`` suffix
        space_key: Space key (e.g., "TEAM")
        page_id: Page ID (e.g., "12345678")

    Returns:
        Full URL: https://domain.atlassian.net/wiki/spaces/TEAM/pages/12345678
    """
    base_url = base_url.rstrip('/')
    if not base_url.endswith('/wiki'):
        base_url = f"{base_url}/wiki"
    return f"{base_url}/spaces/{space_key}/pages/{page_id}"


def parse_page_url(url: str) -> Tuple[Optional[str], Optional[str]]:
    """Extract ``(space_key, page_id)`` from a page URL, or ``(None, None)``."""
    match = PAGE_URL_PATTERN.match(url.strip())
    if match:
        return match.group(1), match.group(2)
    return None, None
