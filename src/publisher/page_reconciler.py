"""Binds every node of the folder tree to a Confluence page.

Walks the tree depth-first from the configured parent page. Each non-root
node is matched to a remote page by its stored page ID, then by an exact
title search inside the space, and is created under its parent otherwise.
Siblings are reconciled concurrently once their parent page is known.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from src.adf.adf_parser import serialize_document
from src.adf.traverse import doc, paragraph
from src.confluence_client.api_wrapper import APIWrapper

from .errors import MissingSpaceKeyError, PageOutsideTreeError
from .models import (
    ConfluenceTreeNode,
    PageDetails,
    RemotePageBinding,
    SourceDocument,
    TreeNode,
)

logger = logging.getLogger(__name__)

MAX_WORKERS = 10

BLANK_PAGE_ADF = serialize_document(doc(paragraph("Page not published yet")))


class PageReconciler:
    """Resolves or creates the remote page of every tree node.

    Example:
        >>> reconciler = PageReconciler(api, file_mapper)
        >>> tree = reconciler.reconcile(root, "TEAM", "123456", "123456")
        >>> bindings = flatten_tree(tree)
    """

    def __init__(self, api: APIWrapper, adaptor: Any, max_workers: int = MAX_WORKERS):
        """Initialize the reconciler.

        Args:
            api: Remote wiki client
            adaptor: Document source; must provide update_markdown_page_id()
            max_workers: Upper bound of concurrently reconciled siblings
        """
        self.api = api
        self.adaptor = adaptor
        self.max_workers = max_workers

    def reconcile(
        self,
        tree: TreeNode,
        space_key: str,
        parent_page_id: str,
        top_page_id: str,
    ) -> ConfluenceTreeNode:
        """Reconcile the whole tree below the configured parent page.

        The root node stands for the parent page itself: it is bound to
        ``parent_page_id`` without any remote call and is never published.

        Args:
            tree: Root of the folder tree
            space_key: Space of the parent page
            parent_page_id: Configured parent page ID
            top_page_id: Page every adopted page must sit below

        Returns:
            Root ConfluenceTreeNode

        Raises:
            PageOutsideTreeError: If a title match lies outside the managed tree
            MissingSpaceKeyError: If a stored page has no space
        """
        logger.info(f"Reconciling page tree below page {parent_page_id} in space {space_key}")
        return self._reconcile_node(
            tree, space_key, parent_page_id, top_page_id, create_page=False
        )

    def _reconcile_node(
        self,
        node: TreeNode,
        space_key: str,
        parent_page_id: str,
        top_page_id: str,
        create_page: bool,
    ) -> ConfluenceTreeNode:
        file = node.file
        if file is None:
            raise ValueError(f"Tree node '{node.name}' has no document")

        if create_page:
            details = self.ensure_page_exists(file, space_key, parent_page_id, top_page_id)
            version = details.version
            existing_adf = details.existing_adf
            file.page_id = details.id
            file.space_key = details.space_key
        else:
            version = 0
            existing_adf = ""
            file.page_id = parent_page_id
            file.space_key = space_key

        page_id = file.page_id
        children: List[ConfluenceTreeNode] = []
        if node.children:
            workers = max(1, min(self.max_workers, len(node.children)))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                children = list(executor.map(
                    lambda child: self._reconcile_node(
                        child, space_key, page_id, top_page_id, create_page=True
                    ),
                    node.children,
                ))

        return ConfluenceTreeNode(
            file=file,
            version=version,
            existing_adf=existing_adf,
            children=children,
        )

    def ensure_page_exists(
        self,
        file: SourceDocument,
        space_key: str,
        parent_page_id: str,
        top_page_id: str,
    ) -> PageDetails:
        """Find or create the remote page of a document.

        Args:
            file: Document to bind
            space_key: Space to search and create in
            parent_page_id: Parent for a newly created page
            top_page_id: Page an adopted page must descend from

        Returns:
            PageDetails of the bound page

        Raises:
            PageOutsideTreeError: If a page with the same title lives outside the tree
            MissingSpaceKeyError: If the stored page carries no space
        """
        if file.page_id:
            page = self.api.get_page_by_id(file.page_id)
            page_space = _space_key(page)
            if not page_space:
                raise MissingSpaceKeyError(file.page_id)
            logger.debug(f"Using stored page {file.page_id} for {file.file_name}")
            return _page_details(page, page_space)

        existing = self.api.get_page_by_title(space_key, file.page_title)
        if existing:
            ancestor_ids = [str(a.get("id")) for a in existing.get("ancestors") or []]
            if str(top_page_id) not in ancestor_ids:
                raise PageOutsideTreeError(file.page_title, str(existing.get("id")), top_page_id)
            details = _page_details(existing, _space_key(existing) or space_key)
            logger.info(f"Adopting existing page '{file.page_title}' ({details.id})")
            self.adaptor.update_markdown_page_id(file.absolute_file_path, details.id, details.space_key)
            return details

        created = self.api.create_page_adf(space_key, file.page_title, BLANK_PAGE_ADF, parent_page_id)
        details = _page_details(created, _space_key(created) or space_key)
        logger.info(f"Created page '{file.page_title}' ({details.id}) under {parent_page_id}")
        self.adaptor.update_markdown_page_id(file.absolute_file_path, details.id, details.space_key)
        return details


def flatten_tree(
    node: ConfluenceTreeNode,
    parent_page_id: Optional[str] = None,
) -> List[RemotePageBinding]:
    """Flatten a reconciled tree into publish bindings, excluding the root.

    Args:
        node: Reconciled node
        parent_page_id: Page ID of ``node``'s parent (None for the root)

    Returns:
        Bindings in depth-first order
    """
    bindings: List[RemotePageBinding] = []
    if parent_page_id is not None:
        bindings.append(RemotePageBinding(
            file=node.file,
            version=node.version,
            existing_adf=node.existing_adf,
            parent_page_id=parent_page_id,
        ))

    for child in node.children:
        bindings.extend(flatten_tree(child, node.file.page_id))
    return bindings


def _space_key(page: Dict[str, Any]) -> Optional[str]:
    space = page.get("space") or {}
    return space.get("key")


def _page_details(page: Dict[str, Any], space_key: str) -> PageDetails:
    body = (page.get("body") or {}).get("atlas_doc_format") or {}
    return PageDetails(
        id=str(page["id"]),
        version=(page.get("version") or {}).get("number", 1),
        existing_adf=body.get("value", ""),
        space_key=space_key,
    )
