"""Unit tests for publisher.media_uploader module."""

import pytest
from unittest.mock import Mock
from src.adf.adf_models import AdfNode
from src.adf.traverse import doc, filter_nodes, paragraph, text
from src.file_mapper.models import BinaryFile
from src.publisher.hashing import attachment_file_name, fingerprint, mermaid_file_name
from src.publisher.media_uploader import MediaUploader, is_file_media, is_mermaid_block

PAGE_ID = "500"
PAGE_FILE = "/vault/docs/page.md"


def image(url, alt=None):
    """mediaSingle wrapping a file media node."""
    attrs = {"type": "file", "url": url}
    if alt:
        attrs["alt"] = alt
    return AdfNode(type="mediaSingle", attrs={"layout": "center"}, content=[AdfNode(type="media", attrs=attrs)])


def mermaid(source):
    """Mermaid code block."""
    return AdfNode(type="codeBlock", attrs={"language": "mermaid"}, content=[text(source)] if source else [])


def upload_response(name, file_id):
    """Attachment record as returned by an upload."""
    return {"id": f"att-{file_id}", "title": name, "extensions": {"fileId": file_id}, "container": {"id": PAGE_ID}}


@pytest.fixture
def api():
    """Mock API with an empty attachment listing."""
    api = Mock()
    api.get_attachments.return_value = []
    api.create_or_update_attachment.side_effect = lambda page_id, name, data, comment, content_type: \
        upload_response(name, f"file-{name}")
    return api


@pytest.fixture
def adaptor():
    """Mock document source that serves two binaries."""
    files = {
        "img/a.png": BinaryFile(filename="a.png", file_path="docs/img/a.png", contents=b"PNG-A"),
        "b.png": BinaryFile(filename="b.png", file_path="docs/b.png", contents=b"PNG-A"),
    }
    adaptor = Mock()
    adaptor.read_binary.side_effect = lambda path, referenced_from: files.get(path)
    return adaptor


@pytest.fixture
def renderer():
    """Mock mermaid renderer returning one PNG per chart."""
    renderer = Mock()
    renderer.capture_mermaid_charts.side_effect = lambda charts: [
        (chart.name, f"PNG:{chart.data}".encode()) for chart in charts
    ]
    return renderer


class TestPredicates:
    """Test cases for node predicates."""

    def test_is_file_media(self):
        """Only file media with a url are local references."""
        assert is_file_media(AdfNode(type="media", attrs={"type": "file", "url": "file://a.png"}))
        assert not is_file_media(AdfNode(type="media", attrs={"type": "file", "id": "x"}))
        assert not is_file_media(AdfNode(type="media", attrs={"type": "external", "url": "https://x"}))

    def test_is_mermaid_block(self):
        """Only code blocks tagged mermaid are diagrams."""
        assert is_mermaid_block(mermaid("graph TD"))
        assert not is_mermaid_block(AdfNode(type="codeBlock", attrs={"language": "python"}))


class TestUploadFiles:
    """Test cases for MediaUploader.upload_files."""

    def test_uploads_and_rewrites_media(self, api, adaptor, renderer):
        """A local image is uploaded with its hash and the node points at it."""
        uploader = MediaUploader(api, adaptor, renderer)
        name = attachment_file_name("docs/img/a.png", "a.png")

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png", alt="A")))

        adaptor.read_binary.assert_called_once_with("img/a.png", PAGE_FILE)
        api.create_or_update_attachment.assert_called_once_with(
            PAGE_ID, name, b"PNG-A", comment=fingerprint(b"PNG-A"), content_type="image/png"
        )
        media = result.content[0].content[0]
        assert media.attrs == {
            "type": "file",
            "alt": "A",
            "id": f"file-{name}",
            "collection": f"contentId-{PAGE_ID}",
        }

    def test_existing_attachment_with_same_hash_not_uploaded(self, api, adaptor, renderer):
        """An attachment whose stored hash matches is reused."""
        name = attachment_file_name("docs/img/a.png", "a.png")
        api.get_attachments.return_value = [{
            "title": name,
            "metadata": {"comment": fingerprint(b"PNG-A")},
            "extensions": {"fileId": "existing-file", "collectionName": "contentId-500"},
        }]
        uploader = MediaUploader(api, adaptor, renderer)

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png")))

        api.create_or_update_attachment.assert_not_called()
        api.get_attachments.assert_called_once_with(PAGE_ID)
        assert result.content[0].content[0].attrs["id"] == "existing-file"

    def test_changed_attachment_reuploaded(self, api, adaptor, renderer):
        """An attachment whose stored hash differs is uploaded again."""
        name = attachment_file_name("docs/img/a.png", "a.png")
        api.get_attachments.return_value = [{
            "title": name,
            "metadata": {"comment": "stale"},
            "extensions": {"fileId": "old-file"},
        }]
        uploader = MediaUploader(api, adaptor, renderer)

        uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png")))

        api.create_or_update_attachment.assert_called_once()

    def test_same_bytes_different_paths_uploaded_separately(self, api, adaptor, renderer):
        """Identical files at two paths become two attachments."""
        uploader = MediaUploader(api, adaptor, renderer)

        uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png"), image("file://b.png")))

        names = [call.args[1] for call in api.create_or_update_attachment.call_args_list]
        assert names == [
            attachment_file_name("docs/img/a.png", "a.png"),
            attachment_file_name("docs/b.png", "b.png"),
        ]

    def test_repeated_reference_uploaded_once(self, api, adaptor, renderer):
        """The same image referenced twice is read and uploaded once."""
        uploader = MediaUploader(api, adaptor, renderer)

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png"), image("file://img/a.png")))

        assert adaptor.read_binary.call_count == 1
        assert api.create_or_update_attachment.call_count == 1
        assert result.content[0] == result.content[1]

    def test_unreadable_media_removed(self, api, adaptor, renderer):
        """A reference that cannot be read is dropped with its container."""
        uploader = MediaUploader(api, adaptor, renderer)
        document = doc(paragraph("before"), image("file://missing.png"), paragraph("after"))

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, document)

        assert [node.type for node in result.content] == ["paragraph", "paragraph"]
        api.create_or_update_attachment.assert_not_called()

    def test_duplicate_diagrams_rendered_once(self, api, adaptor, renderer):
        """Identical diagrams on a page are rendered and uploaded once."""
        uploader = MediaUploader(api, adaptor, renderer)
        document = doc(mermaid("graph TD; A-->B"), paragraph("x"), mermaid("graph TD; A-->B"))

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, document)

        charts = renderer.capture_mermaid_charts.call_args.args[0]
        assert len(charts) == 1
        name, _ = mermaid_file_name("graph TD; A-->B")
        api.create_or_update_attachment.assert_called_once_with(
            PAGE_ID, name, b"PNG:graph TD; A-->B",
            comment=fingerprint(b"PNG:graph TD; A-->B"), content_type="image/png",
        )
        assert [node.type for node in result.content] == ["mediaSingle", "paragraph", "mediaSingle"]
        media = result.content[0].content[0]
        assert media.attrs == {"type": "file", "collection": f"contentId-{PAGE_ID}", "id": f"file-{name}"}

    def test_empty_diagram_uses_placeholder_chart(self, api, adaptor, renderer):
        """An empty mermaid block renders the placeholder chart."""
        uploader = MediaUploader(api, adaptor, renderer)

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, doc(mermaid("")))

        name, chart = mermaid_file_name("")
        assert renderer.capture_mermaid_charts.call_args.args[0][0].data == chart
        assert result.content[0].type == "mediaSingle"

    def test_no_media_no_uploads(self, api, adaptor, renderer):
        """A page without media only lists attachments."""
        uploader = MediaUploader(api, adaptor, renderer)
        document = doc(paragraph("plain"), AdfNode(type="codeBlock", attrs={"language": "python"}))

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, document)

        assert result == document
        api.create_or_update_attachment.assert_not_called()
        renderer.capture_mermaid_charts.assert_called_once_with([])

    def test_result_has_no_local_urls(self, api, adaptor, renderer):
        """Every media node in the result references an attachment."""
        uploader = MediaUploader(api, adaptor, renderer)

        result = uploader.upload_files(PAGE_ID, PAGE_FILE, doc(image("file://img/a.png"), mermaid("graph LR")))

        assert filter_nodes(result, is_file_media) == []
        assert filter_nodes(result, is_mermaid_block) == []
