"""Uploads a page's images and rendered diagrams as attachments.

Every attachment carries the MD5 of its contents in its comment. Before
uploading, the page's attachment listing is fetched once; a binary whose
upload name already exists with the same fingerprint is reused as is.
"""

import logging
import mimetypes
from typing import Any, Dict, List, Optional

from src.adf.adf_models import AdfDocument, AdfNode
from src.adf.traverse import REMOVE, filter_nodes, transform
from src.confluence_client.api_wrapper import APIWrapper
from src.diagram_renderer.mermaid_renderer import ChartData, MermaidRenderer

from .hashing import (
    attachment_file_name,
    build_attachment_index,
    fingerprint,
    mermaid_file_name,
)
from .models import AttachmentRecord, UploadResult

logger = logging.getLogger(__name__)

FILE_URL_SEPARATOR = "://"
MERMAID_LANGUAGE = "mermaid"
PNG_CONTENT_TYPE = "image/png"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def is_file_media(node: AdfNode) -> bool:
    return node.type == "media" and node.attrs.get("type") == "file" and bool(node.attrs.get("url"))


def is_mermaid_block(node: AdfNode) -> bool:
    return node.type == "codeBlock" and node.attrs.get("language") == MERMAID_LANGUAGE


class MediaUploader:
    """Resolves a page's media references to uploaded attachments."""

    def __init__(self, api: APIWrapper, adaptor: Any, mermaid_renderer: MermaidRenderer):
        self.api = api
        self.adaptor = adaptor
        self.mermaid_renderer = mermaid_renderer

    def upload_files(self, page_id: str, page_file_path: str, adf: AdfDocument) -> AdfDocument:
        """Upload everything ``adf`` references and return the rewritten body.

        File media nodes are pointed at their attachment; mermaid code blocks
        are replaced by the rendered image. References that cannot be
        resolved are dropped from the body.

        Args:
            page_id: Page the attachments belong to
            page_file_path: Absolute path of the page's markdown file
            adf: Link-resolved page body

        Returns:
            New AdfDocument
        """
        media_nodes = filter_nodes(adf, is_file_media)
        mermaid_nodes = filter_nodes(adf, is_mermaid_block)

        charts: Dict[str, ChartData] = {}
        for node in mermaid_nodes:
            name, chart_text = mermaid_file_name(node.get_text_content())
            charts.setdefault(name, ChartData(name=name, data=chart_text))
        rendered = self.mermaid_renderer.capture_mermaid_charts(list(charts.values()))

        current_attachments = build_attachment_index(self.api.get_attachments(page_id))

        image_map: Dict[str, Optional[UploadResult]] = {}
        for node in media_nodes:
            url = node.attrs["url"]
            if url in image_map:
                continue
            _, _, file_name = url.partition(FILE_URL_SEPARATOR)
            image_map[url] = self.upload_file(page_id, page_file_path, file_name, current_attachments)

        for name, image in rendered:
            image_map[name] = self.upload_buffer(page_id, name, image, current_attachments)

        return self._rewrite(adf, image_map)

    def upload_file(
        self,
        page_id: str,
        page_file_path: str,
        file_name: str,
        current_attachments: Dict[str, AttachmentRecord],
    ) -> Optional[UploadResult]:
        """Upload a referenced local binary unless an identical copy exists.

        Returns:
            UploadResult, or None if the binary cannot be read
        """
        binary = self.adaptor.read_binary(file_name, page_file_path)
        if binary is None:
            logger.warning(f"Could not read '{file_name}' referenced from {page_file_path}, skipping")
            return None

        upload_name = attachment_file_name(binary.file_path, binary.filename)
        content_type = mimetypes.guess_type(binary.filename)[0] or DEFAULT_CONTENT_TYPE
        return self._upload(page_id, upload_name, binary.contents, content_type, current_attachments)

    def upload_buffer(
        self,
        page_id: str,
        upload_name: str,
        data: bytes,
        current_attachments: Dict[str, AttachmentRecord],
    ) -> UploadResult:
        """Upload a rendered diagram unless an identical copy exists."""
        return self._upload(page_id, upload_name, data, PNG_CONTENT_TYPE, current_attachments)

    def _upload(
        self,
        page_id: str,
        upload_name: str,
        data: bytes,
        content_type: str,
        current_attachments: Dict[str, AttachmentRecord],
    ) -> UploadResult:
        file_hash = fingerprint(data)
        existing = current_attachments.get(upload_name)
        if existing is not None and existing.file_hash == file_hash:
            logger.info(f"Attachment {upload_name} unchanged on page {page_id}, skipping upload")
            return UploadResult(
                filename=upload_name,
                attachment_id=existing.attachment_id,
                collection_name=existing.collection_name,
            )

        logger.info(f"Uploading attachment {upload_name} to page {page_id}")
        record = self.api.create_or_update_attachment(
            page_id, upload_name, data, comment=file_hash, content_type=content_type
        )
        extensions = record.get("extensions") or {}
        container_id = (record.get("container") or {}).get("id", page_id)
        return UploadResult(
            filename=upload_name,
            attachment_id=extensions.get("fileId"),
            collection_name=f"contentId-{container_id}",
        )

    def _rewrite(self, adf: AdfDocument, image_map: Dict[str, Optional[UploadResult]]) -> AdfDocument:
        def resolve_media(node: AdfNode):
            if not is_file_media(node):
                return None
            uploaded = image_map.get(node.attrs["url"])
            if uploaded is None:
                return REMOVE
            attrs = {key: value for key, value in node.attrs.items() if key != "url"}
            attrs["id"] = uploaded.attachment_id
            attrs["collection"] = uploaded.collection_name
            return AdfNode(type="media", attrs=attrs, marks=list(node.marks))

        def resolve_container(node: AdfNode):
            content: List[AdfNode] = []
            for child in node.content:
                resolved = resolve_media(child) if child.type == "media" else None
                if resolved is REMOVE:
                    continue
                content.append(resolved if resolved is not None else _copy(child))
            if not content:
                return REMOVE
            return AdfNode(type=node.type, attrs=dict(node.attrs), content=content, marks=list(node.marks))

        def resolve_mermaid(node: AdfNode):
            if not is_mermaid_block(node):
                return None
            name, _ = mermaid_file_name(node.get_text_content())
            uploaded = image_map.get(name)
            if uploaded is None:
                return REMOVE
            return AdfNode(
                type="mediaSingle",
                attrs={"layout": "center"},
                content=[AdfNode(type="media", attrs={
                    "type": "file",
                    "collection": uploaded.collection_name,
                    "id": uploaded.attachment_id,
                })],
            )

        return transform(adf, {
            "media": resolve_media,
            "mediaSingle": resolve_container,
            "mediaGroup": resolve_container,
            "codeBlock": resolve_mermaid,
        })


def _copy(node: AdfNode) -> AdfNode:
    return transform(AdfDocument(content=[node]), {}).content[0]
