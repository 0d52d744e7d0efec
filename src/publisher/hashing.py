"""Content fingerprints and the attachment dedup index.

Fingerprints are MD5 hex digests. They are stored in attachment comments and
compared on later runs, so the algorithm and the input normalization must not
change between releases.
"""

import hashlib
import posixpath
from typing import Any, Dict, Iterable, Tuple, Union

from .models import AttachmentRecord

DEFAULT_MERMAID_CHART = "flowchart LR\nid1[Missing Chart]"


def fingerprint(data: Union[bytes, str]) -> str:
    """Return the MD5 hex digest of raw bytes or UTF-8 text."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data).hexdigest()


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path so it hashes the same on every OS."""
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return normalized.lstrip("/")


def attachment_file_name(source_path: str, original_filename: str) -> str:
    """Upload name for a referenced binary: ``{md5(path)}-{filename}``.

    The path fingerprint keeps same-named files from different folders apart.
    """
    return f"{fingerprint(normalize_path(source_path))}-{original_filename}"


def mermaid_file_name(mermaid_text: str) -> Tuple[str, str]:
    """Return ``(upload_filename, chart_text)`` for a diagram's source.

    Empty source is replaced by a placeholder chart so the page still renders.
    """
    chart_text = mermaid_text or DEFAULT_MERMAID_CHART
    return f"RenderedMermaidChart-{fingerprint(chart_text)}.png", chart_text


def build_attachment_index(attachments: Iterable[Dict[str, Any]]) -> Dict[str, AttachmentRecord]:
    """Index a page's attachment listing by attachment title."""
    index: Dict[str, AttachmentRecord] = {}
    for attachment in attachments:
        title = attachment.get("title")
        if not title:
            continue
        metadata = attachment.get("metadata") or {}
        extensions = attachment.get("extensions") or {}
        index[title] = AttachmentRecord(
            file_hash=metadata.get("comment") or extensions.get("comment"),
            attachment_id=extensions.get("fileId"),
            collection_name=extensions.get("collectionName"),
        )
    return index
