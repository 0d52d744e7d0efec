"""Parser and serializer for ADF (Atlassian Document Format) documents.

Converts ADF JSON into AdfDocument/AdfNode objects and back into the
canonical string form that is stored on Confluence and compared on the
next publish.
"""

import json
import logging
from typing import Any, Dict, Union

from .adf_models import AdfDocument, AdfMark, AdfNode

logger = logging.getLogger(__name__)


class AdfParser:
    """Parser for ADF documents."""

    def parse_document(self, adf_json: Dict[str, Any]) -> AdfDocument:
        """Parse an ADF JSON document into an AdfDocument object.

        Args:
            adf_json: The ADF document as a dictionary (parsed JSON)

        Returns:
            AdfDocument object with parsed content tree

        Raises:
            ValueError: If the JSON is not valid ADF format
        """
        if not isinstance(adf_json, dict):
            raise ValueError("ADF must be a dictionary")

        doc_type = adf_json.get("type")
        if doc_type != "doc":
            raise ValueError(f"Expected type 'doc', got '{doc_type}'")

        version = adf_json.get("version", 1)
        content_data = adf_json.get("content", [])

        content = [self._parse_node(node_data) for node_data in content_data]

        return AdfDocument(version=version, content=content)

    def parse_from_string(self, adf_string: str) -> AdfDocument:
        """Parse an ADF JSON string into an AdfDocument object."""
        return self.parse_document(json.loads(adf_string))

    def _parse_node(self, node_data: Dict[str, Any]) -> AdfNode:
        node_type = node_data.get("type", "unknown")
        text = node_data.get("text")
        attrs = dict(node_data.get("attrs") or {})

        marks = [
            AdfMark(type=m.get("type", "unknown"), attrs=dict(m.get("attrs") or {}))
            for m in node_data.get("marks") or []
        ]

        content = [self._parse_node(child) for child in node_data.get("content") or []]

        return AdfNode(
            type=node_type,
            content=content,
            text=text,
            attrs=attrs,
            marks=marks,
        )


def serialize_document(document: Union[AdfDocument, Dict[str, Any]]) -> str:
    """Serialize an ADF document to its canonical string form.

    The same document always produces the same bytes, so the result can be
    compared against the body previously stored on Confluence.

    Args:
        document: AdfDocument or raw ADF dictionary

    Returns:
        Compact JSON string
    """
    if isinstance(document, AdfDocument):
        document = document.to_dict()
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)
