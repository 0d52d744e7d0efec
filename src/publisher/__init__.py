"""Publish reconciliation engine.

Turns a set of converted markdown documents into a Confluence page tree:
builds the folder tree, binds each node to a remote page, rewrites internal
links, uploads media and writes changed page bodies.
"""

from .models import (
    SourceDocument,
    TreeNode,
    PageDetails,
    ConfluenceTreeNode,
    RemotePageBinding,
    AttachmentRecord,
    UploadResult,
    FilePublishResult,
    PublishFailure,
    PublishOutcome,
)
from .errors import (
    PublisherError,
    DuplicateFileNameError,
    MissingSpaceKeyError,
    MissingPageIdError,
    PageOutsideTreeError,
)
from .tree_builder import build_folder_tree, find_common_path
from .page_reconciler import PageReconciler, flatten_tree
from .link_resolver import LinkResolver
from .media_uploader import MediaUploader
from .content_synchronizer import ContentSynchronizer
from .publisher import Publisher

__all__ = [
    'SourceDocument',
    'TreeNode',
    'PageDetails',
    'ConfluenceTreeNode',
    'RemotePageBinding',
    'AttachmentRecord',
    'UploadResult',
    'FilePublishResult',
    'PublishFailure',
    'PublishOutcome',
    'PublisherError',
    'DuplicateFileNameError',
    'MissingSpaceKeyError',
    'MissingPageIdError',
    'PageOutsideTreeError',
    'build_folder_tree',
    'find_common_path',
    'PageReconciler',
    'flatten_tree',
    'LinkResolver',
    'MediaUploader',
    'ContentSynchronizer',
    'Publisher',
]
