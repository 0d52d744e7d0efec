"""Publish orchestrator: local documents in, Confluence page tree out.

A publish run has two phases. The reconciliation phase binds every document
to a remote page and aborts the whole run on error. The publish phase then
uploads attachments and page bodies, one independent task per page; a failing
page is reported and does not affect the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.diagram_renderer.mermaid_renderer import MermaidRenderer

from .content_synchronizer import ContentSynchronizer
from .errors import MissingPageIdError, MissingSpaceKeyError
from .link_resolver import LinkResolver
from .media_uploader import MediaUploader
from .models import (
    FilePublishResult,
    PublishFailure,
    PublishOutcome,
    RemotePageBinding,
    SourceDocument,
)
from .page_reconciler import MAX_WORKERS, PageReconciler, flatten_tree
from .tree_builder import build_folder_tree

if TYPE_CHECKING:
    from src.file_mapper.models import PublishConfig

logger = logging.getLogger(__name__)


class Publisher:
    """Publishes a set of markdown documents below a configured parent page.

    Example:
        >>> publisher = Publisher(file_mapper, config, api, renderer)
        >>> outcome = publisher.do_publish()
        >>> print(outcome.successful_uploads, len(outcome.failed_files))
    """

    def __init__(
        self,
        adaptor: Any,
        settings: 'PublishConfig',
        api: APIWrapper,
        mermaid_renderer: MermaidRenderer,
    ):
        """Initialize the publisher.

        Args:
            adaptor: Document source (get_markdown_files_to_upload,
                read_binary, update_markdown_page_id)
            settings: Publish configuration (base URL, parent page, workers)
            api: Remote wiki client
            mermaid_renderer: Renderer for mermaid code blocks
        """
        self.adaptor = adaptor
        self.settings = settings
        self.api = api
        self.max_workers = getattr(settings, 'max_workers', MAX_WORKERS) or MAX_WORKERS

        self.reconciler = PageReconciler(api, adaptor, self.max_workers)
        self.link_resolver = LinkResolver(settings.confluence_base_url)
        self.media_uploader = MediaUploader(api, adaptor, mermaid_renderer)
        self.synchronizer = ContentSynchronizer(api)

    def do_publish(self, publish_filter: Optional[str] = None) -> PublishOutcome:
        """Run a full publish.

        Args:
            publish_filter: Absolute path of the only document to publish
                (the whole tree is still reconciled)

        Returns:
            PublishOutcome with per-page failures

        Raises:
            MissingSpaceKeyError: If the parent page has no space
            MissingPageIdError: If a document is left without a page
            PageOutsideTreeError: If a title match lies outside the page tree
            DuplicateFileNameError: If two documents share a file name
        """
        parent_page_id = str(self.settings.parent_page_id)
        parent_page = self.api.get_page_by_id(parent_page_id, expand="body.atlas_doc_format,space")
        space_key = (parent_page.get("space") or {}).get("key")
        if not space_key:
            raise MissingSpaceKeyError(parent_page_id)
        parent_page_id = str(parent_page.get("id", parent_page_id))

        files = self.adaptor.get_markdown_files_to_upload()
        if not files:
            logger.warning("No markdown files to publish")
            return PublishOutcome()

        logger.info(f"Publishing {len(files)} document(s) to space {space_key}")
        folder_tree = build_folder_tree(files)
        page_tree = self.reconciler.reconcile(folder_tree, space_key, parent_page_id, parent_page_id)
        bindings = flatten_tree(page_tree)

        file_map: Dict[str, SourceDocument] = {}
        for binding in bindings:
            if not binding.file.page_id:
                raise MissingPageIdError(binding.file.absolute_file_path)
            file_map[binding.file.file_name] = binding.file

        for binding in bindings:
            binding.file.contents = self.link_resolver.resolve_links(binding.file.contents, file_map)

        if publish_filter:
            bindings = [b for b in bindings if b.file.absolute_file_path == publish_filter]
            logger.info(f"Publish filter matched {len(bindings)} page(s)")

        results = self._publish_all(bindings)
        return summarize_results(results)

    def _publish_all(self, bindings: List[RemotePageBinding]) -> List[FilePublishResult]:
        if not bindings:
            return []

        results: List[FilePublishResult] = []
        workers = max(1, min(self.max_workers, len(bindings)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.publish_file, binding): binding
                for binding in bindings
            }

            for future in as_completed(futures):
                binding = futures[future]
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.error(f"Failed to publish {binding.file.absolute_file_path}: {e}")
                    results.append(FilePublishResult(
                        successful_upload=False,
                        absolute_file_path=binding.file.absolute_file_path,
                        reason=_describe_error(e),
                    ))

        return results

    def publish_file(self, binding: RemotePageBinding) -> FilePublishResult:
        """Upload one page's attachments and body.

        Exceptions are returned as a failed FilePublishResult, never raised.
        """
        file = binding.file
        try:
            if not file.page_id:
                raise MissingPageIdError(file.absolute_file_path)

            body = self.media_uploader.upload_files(file.page_id, file.absolute_file_path, file.contents)
            self.synchronizer.synchronize(binding, body)
            return FilePublishResult(successful_upload=True, absolute_file_path=file.absolute_file_path)
        except Exception as e:
            logger.error(f"Failed to publish {file.absolute_file_path}: {e}")
            return FilePublishResult(
                successful_upload=False,
                absolute_file_path=file.absolute_file_path,
                reason=_describe_error(e),
            )


def summarize_results(results: List[FilePublishResult]) -> PublishOutcome:
    """Fold per-page results into a PublishOutcome."""
    outcome = PublishOutcome()
    for result in results:
        if result.successful_upload:
            outcome.successful_uploads += 1
            continue
        outcome.failed_files.append(PublishFailure(
            file_name=result.absolute_file_path,
            reason=result.reason or "No reason provided",
        ))
    return outcome


def _describe_error(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"
