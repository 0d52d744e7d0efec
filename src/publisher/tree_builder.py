"""Builds the folder tree that mirrors the local document layout.

The tree is rooted at the longest directory shared by every document. Each
folder becomes a node; each document becomes a leaf. Afterwards every folder
node gets a document of its own: a child document named after the folder
is promoted to the folder, otherwise a placeholder page is synthesized.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from src.adf.adf_models import AdfDocument, AdfNode
from src.adf.traverse import doc

from .errors import DuplicateFileNameError
from .models import SourceDocument, TreeNode

logger = logging.getLogger(__name__)


def folder_placeholder_document() -> AdfDocument:
    """Body for a folder page: a macro listing the folder's child pages."""
    return doc(
        AdfNode(
            type="extension",
            attrs={
                "layout": "default",
                "extensionType": "com.atlassian.confluence.macro.core",
                "extensionKey": "children",
                "parameters": {
                    "macroParams": {"all": {"value": "true"}},
                    "macroMetadata": {"title": "Children Display"},
                },
            },
        )
    )


def find_common_path(paths: Sequence[str]) -> str:
    """Longest directory shared by every path, compared component-wise.

    A single path yields its own directory.

    Args:
        paths: Absolute file paths

    Returns:
        The common directory

    Raises:
        ValueError: If paths is empty
    """
    if not paths:
        raise ValueError("Cannot find a common path of no files")

    common_parts = list(Path(paths[0]).parent.parts)
    for file_path in paths[1:]:
        parts = Path(file_path).parent.parts
        for i, part in enumerate(common_parts):
            if i >= len(parts) or parts[i] != part:
                del common_parts[i:]
                break

    if not common_parts:
        return ""
    return str(Path(*common_parts))


def build_folder_tree(files: Iterable[SourceDocument]) -> TreeNode:
    """Build the folder tree for a set of documents.

    Args:
        files: Documents with absolute paths

    Returns:
        Root TreeNode named after the common directory

    Raises:
        DuplicateFileNameError: If two documents share a file name
    """
    files = list(files)
    common_path = find_common_path([f.absolute_file_path for f in files])
    root = TreeNode(name=common_path)
    file_names: Set[str] = set()

    for file in files:
        relative_parts = Path(os.path.relpath(file.absolute_file_path, common_path)).parts
        add_file_to_tree(root, file, list(relative_parts), file_names)

    assign_index_documents(root, common_path, is_root=True)

    logger.debug(f"Built folder tree rooted at {common_path} with {len(files)} document(s)")
    return root


def add_file_to_tree(
    node: TreeNode,
    file: SourceDocument,
    relative_parts: List[str],
    file_names: Set[str],
) -> None:
    """Insert ``file`` below ``node`` following ``relative_parts``.

    ``file_names`` accumulates every file name seen so far in the whole tree.

    Raises:
        DuplicateFileNameError: If the file name was already inserted
    """
    name, remaining = relative_parts[0], relative_parts[1:]

    if not remaining:
        if file.file_name in file_names:
            raise DuplicateFileNameError(file.file_name)
        file_names.add(file.file_name)
        node.children.append(TreeNode(name=name, file=file))
        return

    child = _find_folder(node, name)
    if child is None:
        child = TreeNode(name=name)
        node.children.append(child)

    add_file_to_tree(child, file, remaining, file_names)


def _find_folder(node: TreeNode, name: str) -> Optional[TreeNode]:
    for child in node.children:
        if child.name == name and child.file is None:
            return child
    return None


def assign_index_documents(node: TreeNode, folder_path: str, is_root: bool = False) -> None:
    """Give every folder node a document, top-down.

    The root keeps a placeholder: it stands for the configured parent page,
    so promoting a real document into it would stop that document from being
    published.
    """
    if node.file is None:
        index_child = None if is_root else _find_index_child(node)
        if index_child is not None:
            node.file = index_child.file
            node.children = [child for child in node.children if child is not index_child]
            logger.debug(f"Promoted {index_child.name} to folder page of {folder_path}")
        else:
            node.file = create_folder_file(node.name if not is_root else Path(folder_path).name, folder_path)

    for child in node.children:
        assign_index_documents(child, os.path.join(folder_path, child.name))


def _find_index_child(node: TreeNode) -> Optional[TreeNode]:
    documents = [child for child in node.children if child.file is not None and not child.children]
    for child in documents:
        if Path(child.name).stem == node.name:
            return child
    return None


def create_folder_file(name: str, folder_path: str) -> SourceDocument:
    """Synthesize the placeholder document of a folder without an index page."""
    return SourceDocument(
        folder_name=name,
        absolute_file_path=folder_path,
        file_name=f"{name}.md",
        contents=folder_placeholder_document(),
        page_title=name,
        frontmatter={},
        tags=[],
        page_id=None,
        dont_change_parent_page_id=False,
    )
