"""Unit tests for publisher.tree_builder module."""

import os

import pytest
from src.adf.traverse import doc, paragraph
from src.publisher.errors import DuplicateFileNameError
from src.publisher.models import SourceDocument
from src.publisher.tree_builder import (
    build_folder_tree,
    create_folder_file,
    find_common_path,
)


def create_document(path):
    """Create a SourceDocument for an absolute path."""
    return SourceDocument(
        folder_name=os.path.basename(os.path.dirname(path)),
        absolute_file_path=path,
        file_name=os.path.basename(path),
        contents=doc(paragraph(path)),
        page_title=os.path.splitext(os.path.basename(path))[0],
    )


def child_names(node):
    """Names of a node's children."""
    return [child.name for child in node.children]


class TestFindCommonPath:
    """Test cases for find_common_path."""

    def test_single_file(self):
        """A single file yields its own directory."""
        assert find_common_path(["/vault/docs/a.md"]) == "/vault/docs"

    def test_compares_whole_components(self):
        """Prefixes are compared per path component, not per character."""
        assert find_common_path(["/vault/docs/a.md", "/vault/docs2/b.md"]) == "/vault"

    def test_nested(self):
        """The deepest shared directory is returned."""
        paths = ["/vault/docs/a/x.md", "/vault/docs/b/c/y.md", "/vault/docs/z.md"]
        assert find_common_path(paths) == "/vault/docs"

    def test_empty(self):
        """No paths is an error."""
        with pytest.raises(ValueError):
            find_common_path([])


class TestBuildFolderTree:
    """Test cases for build_folder_tree."""

    def test_root_is_placeholder_named_after_folder(self):
        """The root always gets a synthesized folder page."""
        tree = build_folder_tree([create_document("/vault/docs/a.md")])

        assert tree.name == "/vault/docs"
        assert tree.file.page_title == "docs"
        assert tree.file.contents.content[0].attrs["extensionKey"] == "children"
        assert child_names(tree) == ["a.md"]

    def test_root_index_is_not_promoted(self):
        """A root index.md stays a normal child page."""
        files = [create_document("/root/index.md"), create_document("/root/a/b.md")]

        tree = build_folder_tree(files)

        assert tree.file.page_title == "root"
        assert child_names(tree) == ["index.md", "a"]
        folder = tree.children[1]
        assert folder.file.page_title == "a"
        assert child_names(folder) == ["b.md"]

    def test_folder_index_is_not_promoted(self):
        """index.md in a sub folder stays a child; the folder gets a placeholder."""
        files = [
            create_document("/vault/top.md"),
            create_document("/vault/guide/index.md"),
            create_document("/vault/guide/a.md"),
        ]

        tree = build_folder_tree(files)

        guide = next(child for child in tree.children if child.name == "guide")
        assert guide.file.page_title == "guide"
        assert guide.file.absolute_file_path == os.path.join("/vault", "guide")
        assert guide.file.contents.content[0].attrs["extensionKey"] == "children"
        assert child_names(guide) == ["index.md", "a.md"]

    def test_folder_name_document_is_promoted(self):
        """A document named after its folder becomes the folder's page."""
        files = [
            create_document("/vault/guide/index.md"),
            create_document("/vault/guide/guide.md"),
            create_document("/vault/other.md"),
        ]

        tree = build_folder_tree(files)

        guide = next(child for child in tree.children if child.name == "guide")
        assert guide.file is files[1]
        assert child_names(guide) == ["index.md"]

    def test_every_node_has_a_document(self):
        """Intermediate folders without documents get placeholders."""
        files = [create_document("/vault/a/b/c/deep.md"), create_document("/vault/top.md")]

        tree = build_folder_tree(files)

        def walk(node):
            assert node.file is not None
            for child in node.children:
                walk(child)

        walk(tree)
        a = tree.children[0]
        assert a.file.file_name == "a.md"
        assert a.children[0].file.page_title == "b"

    def test_duplicate_file_names_rejected(self):
        """Two files with the same name anywhere in the tree are rejected."""
        files = [create_document("/vault/a/notes.md"), create_document("/vault/b/notes.md")]

        with pytest.raises(DuplicateFileNameError, match="notes.md"):
            build_folder_tree(files)


class TestCreateFolderFile:
    """Test cases for create_folder_file."""

    def test_placeholder_fields(self):
        """The placeholder points at the folder and has no page yet."""
        placeholder = create_folder_file("guide", "/vault/guide")

        assert placeholder.absolute_file_path == "/vault/guide"
        assert placeholder.file_name == "guide.md"
        assert placeholder.page_title == "guide"
        assert placeholder.page_id is None
        assert placeholder.tags == []
