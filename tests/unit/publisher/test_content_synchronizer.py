"""Unit tests for publisher.content_synchronizer module."""

import pytest
from unittest.mock import Mock
from src.adf.adf_parser import serialize_document
from src.adf.traverse import doc, paragraph
from src.publisher.content_synchronizer import ContentSynchronizer
from src.publisher.models import RemotePageBinding, SourceDocument


def create_binding(existing_adf="", tags=None, keep_parent=False, version=4):
    """Create a binding for page 42 below page 7."""
    document = SourceDocument(
        folder_name="docs",
        absolute_file_path="/vault/docs/guide.md",
        file_name="guide.md",
        contents=doc(),
        page_title="Guide",
        tags=tags or [],
        page_id="42",
        dont_change_parent_page_id=keep_parent,
        space_key="TEAM",
    )
    return RemotePageBinding(file=document, version=version, existing_adf=existing_adf, parent_page_id="7")


@pytest.fixture
def api():
    """Mock API with no labels."""
    api = Mock()
    api.get_labels.return_value = []
    return api


class TestSynchronize:
    """Test cases for ContentSynchronizer.synchronize."""

    def test_unchanged_body_makes_no_calls(self, api):
        """An identical stored body causes no update and no label calls."""
        body = doc(paragraph("Hello"))
        binding = create_binding(existing_adf=serialize_document(body), tags=["docs"])

        assert ContentSynchronizer(api).synchronize(binding, body) is False

        api.update_page_adf.assert_not_called()
        api.get_labels.assert_not_called()
        api.add_labels.assert_not_called()
        api.remove_label.assert_not_called()

    def test_changed_body_updates_page(self, api):
        """A different body is written with the current version and parent."""
        body = doc(paragraph("New"))
        binding = create_binding(existing_adf=serialize_document(doc(paragraph("Old"))))

        assert ContentSynchronizer(api).synchronize(binding, body) is True

        api.update_page_adf.assert_called_once_with(
            "42", "Guide", serialize_document(body), 4, parent_id="7"
        )

    def test_keep_parent_omits_parent(self, api):
        """confluence_keep_parent documents are updated without a parent."""
        binding = create_binding(keep_parent=True)

        ContentSynchronizer(api).synchronize(binding, doc(paragraph("New")))

        assert api.update_page_adf.call_args.kwargs["parent_id"] is None

    def test_labels_synced_after_update(self, api):
        """Labels are reconciled when the page is updated."""
        api.get_labels.return_value = [{"name": "old"}, {"name": "docs"}]
        binding = create_binding(tags=["docs", "api"])

        ContentSynchronizer(api).synchronize(binding, doc(paragraph("New")))

        api.remove_label.assert_called_once_with("42", "old")
        api.add_labels.assert_called_once_with("42", ["api"])


class TestSyncLabels:
    """Test cases for ContentSynchronizer.sync_labels."""

    def test_matching_labels_no_writes(self, api):
        """Labels already equal to the tags cause no writes."""
        api.get_labels.return_value = [{"name": "docs"}]

        ContentSynchronizer(api).sync_labels("42", ["docs"])

        api.remove_label.assert_not_called()
        api.add_labels.assert_not_called()

    def test_no_tags_removes_all(self, api):
        """A page without tags loses all its labels."""
        api.get_labels.return_value = [{"name": "a"}, {"name": "b"}]

        ContentSynchronizer(api).sync_labels("42", [])

        assert [call.args for call in api.remove_label.call_args_list] == [("42", "a"), ("42", "b")]
        api.add_labels.assert_not_called()

    def test_label_case_ignored(self, api):
        """A tag differing from the stored label only in case causes no writes."""
        api.get_labels.return_value = [{"name": "docs"}]

        ContentSynchronizer(api).sync_labels("42", ["Docs"])

        api.remove_label.assert_not_called()
        api.add_labels.assert_not_called()
