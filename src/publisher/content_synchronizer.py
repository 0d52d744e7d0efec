"""Writes a page body to Confluence only when it differs from the stored one."""

import logging
from typing import List

from src.adf.adf_models import AdfDocument
from src.adf.adf_parser import serialize_document
from src.confluence_client.api_wrapper import APIWrapper

from .models import RemotePageBinding

logger = logging.getLogger(__name__)


class ContentSynchronizer:
    """Updates page bodies and labels.

    The stored body is compared byte for byte against the canonical
    serialization of the new body. An unchanged page causes no write at all,
    so republishing an unchanged tree never bumps a version.
    """

    def __init__(self, api: APIWrapper):
        self.api = api

    def synchronize(self, binding: RemotePageBinding, body: AdfDocument) -> bool:
        """Publish ``body`` to the binding's page.

        Args:
            binding: Page to update, with its current version and stored body
            body: Fully resolved page body

        Returns:
            True if the page was updated, False if it was already current
        """
        file = binding.file
        serialized = serialize_document(body)

        if serialized == binding.existing_adf:
            logger.info(f"Page '{file.page_title}' ({file.page_id}) is unchanged, skipping update")
            return False

        parent_id = None if file.dont_change_parent_page_id else binding.parent_page_id
        logger.info(
            f"Updating page '{file.page_title}' ({file.page_id}) "
            f"to version {binding.version + 1}"
        )
        self.api.update_page_adf(
            file.page_id,
            file.page_title,
            serialized,
            binding.version,
            parent_id=parent_id,
        )

        self.sync_labels(file.page_id, file.tags)
        return True

    def sync_labels(self, page_id: str, tags: List[str]) -> None:
        """Make the page's labels equal to ``tags``, ignoring case."""
        current = self.api.get_labels(page_id)
        current_names = [label.get("name") for label in current]
        wanted = {tag.lower() for tag in tags}
        existing = {name.lower() for name in current_names if name}

        for name in current_names:
            if name and name.lower() not in wanted:
                logger.debug(f"Removing label '{name}' from page {page_id}")
                self.api.remove_label(page_id, name)

        to_add = [tag for tag in tags if tag.lower() not in existing]
        if to_add:
            logger.debug(f"Adding labels {to_add} to page {page_id}")
            self.api.add_labels(page_id, to_add)
