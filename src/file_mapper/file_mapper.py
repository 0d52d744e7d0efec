"""Document source backed by a local folder of markdown files.

FileMapper reads the markdown files to publish, converts them to ADF,
resolves binaries they reference, and writes resolved page IDs back into
each file's frontmatter.
"""

import fnmatch
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from ..content_converter.markdown_converter import MarkdownConverter
from ..publisher.models import SourceDocument
from .errors import FilesystemError, FrontmatterError
from .frontmatter_handler import FrontmatterHandler
from .models import BinaryFile, PublishConfig


logger = logging.getLogger(__name__)

# Maximum file size to prevent memory exhaustion
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB in bytes

MARKDOWN_SUFFIX = '.md'


class FileMapper:
    """Reads, converts and updates the markdown files of a vault.

    Example:
        >>> config = ConfigLoader.load('.confluence-publish/config.yaml')
        >>> mapper = FileMapper(config, MarkdownConverter())
        >>> documents = mapper.get_markdown_files_to_upload()
    """

    def __init__(self, config: PublishConfig, converter: MarkdownConverter):
        """Initialize the file mapper.

        Args:
            config: Publish configuration (local_path, exclude, base URL)
            converter: Markdown to ADF conversion service
        """
        self.config = config
        self.converter = converter
        self.base_path = os.path.abspath(config.local_path)
        self._basename_index: Optional[Dict[str, List[str]]] = None

    def _validate_path_safety(self, file_path: str, base_directory: str) -> None:
        """Validate that a file path is within the base directory.

        Resolves symlinks so links pointing outside the vault are rejected too.

        Raises:
            FilesystemError: If path is outside base directory
        """
        real_base = os.path.realpath(base_directory)
        real_path = os.path.realpath(file_path)

        if not real_path.startswith(real_base + os.sep) and real_path != real_base:
            raise FilesystemError(
                file_path,
                'validate',
                f'Path traversal detected: {file_path} is outside base directory {base_directory}'
            )

    def _validate_file_size(self, file_path: str, max_size: int = MAX_FILE_SIZE) -> None:
        """Validate that a file size is within acceptable limits.

        Raises:
            FilesystemError: If file size exceeds maximum allowed size
        """
        try:
            file_size = os.path.getsize(file_path)
        except OSError as e:
            raise FilesystemError(
                file_path,
                'stat',
                f'Failed to check file size: {e}'
            )
        if file_size > max_size:
            size_mb = file_size / (1024 * 1024)
            max_mb = max_size / (1024 * 1024)
            raise FilesystemError(
                file_path,
                'read',
                f'File size ({size_mb:.2f} MB) exceeds maximum allowed size ({max_mb:.0f} MB)'
            )

    def _relative_path(self, file_path: str) -> str:
        return Path(os.path.relpath(file_path, self.base_path)).as_posix()

    def _is_excluded(self, relative_path: str) -> bool:
        return any(fnmatch.fnmatch(relative_path, pattern) for pattern in self.config.exclude)

    def _walk_markdown_files(self) -> List[str]:
        if not os.path.isdir(self.base_path):
            raise FilesystemError(
                self.base_path,
                'read',
                'Path does not exist or is not a directory'
            )

        paths: List[str] = []
        for root, dirs, files in os.walk(self.base_path):
            dirs[:] = sorted(d for d in dirs if not d.startswith('.'))
            for filename in sorted(files):
                if not filename.endswith(MARKDOWN_SUFFIX):
                    continue
                file_path = os.path.join(root, filename)
                if self._is_excluded(self._relative_path(file_path)):
                    logger.debug(f"Excluded by config: {file_path}")
                    continue
                paths.append(file_path)
        return paths

    def get_markdown_files_to_upload(self) -> List[SourceDocument]:
        """Read and convert every markdown file that should be published.

        Files with unparseable frontmatter are skipped with a warning.

        Returns:
            List of SourceDocument in path order

        Raises:
            FilesystemError: If local_path cannot be read
            ConversionError: If a document cannot be converted
        """
        documents: List[SourceDocument] = []

        for file_path in self._walk_markdown_files():
            self._validate_path_safety(file_path, self.base_path)
            self._validate_file_size(file_path)

            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise FilesystemError(file_path, 'read', str(e))

            try:
                frontmatter, body = FrontmatterHandler.parse(file_path, content)
            except FrontmatterError as e:
                logger.warning(f"Failed to parse {file_path}: {e} - skipping")
                continue

            if not FrontmatterHandler.is_publishable(frontmatter):
                logger.info(f"Skipping {self._relative_path(file_path)} (confluence_publish: false)")
                continue

            path = Path(file_path)
            documents.append(SourceDocument(
                folder_name=path.parent.name,
                absolute_file_path=str(path),
                file_name=path.name,
                contents=self.converter.markdown_to_adf(body),
                page_title=FrontmatterHandler.get_title(frontmatter, body, path.stem),
                frontmatter=frontmatter,
                tags=FrontmatterHandler.get_tags(frontmatter),
                page_id=FrontmatterHandler.get_page_id(frontmatter),
                dont_change_parent_page_id=FrontmatterHandler.keeps_parent(frontmatter),
            ))

        logger.info(f"Found {len(documents)} markdown file(s) to publish in {self.base_path}")
        return documents

    def read_binary(self, path: str, referenced_from: str) -> Optional[BinaryFile]:
        """Read a binary referenced from a document.

        The reference is tried relative to the referencing document, then
        relative to the vault root, then as a file name that is unique in the
        vault.

        Args:
            path: Reference as written in the document
            referenced_from: Absolute path of the referencing document

        Returns:
            BinaryFile, or None if the file cannot be found or read
        """
        for candidate in self._binary_candidates(path, referenced_from):
            try:
                self._validate_path_safety(candidate, self.base_path)
            except FilesystemError as e:
                logger.warning(str(e))
                continue
            if not os.path.isfile(candidate):
                continue

            try:
                self._validate_file_size(candidate)
                with open(candidate, 'rb') as f:
                    contents = f.read()
            except (FilesystemError, OSError) as e:
                logger.warning(f"Cannot read {candidate}: {e}")
                return None

            return BinaryFile(
                filename=os.path.basename(candidate),
                file_path=self._relative_path(candidate),
                contents=contents,
            )

        return None

    def _binary_candidates(self, path: str, referenced_from: str) -> List[str]:
        path = path.replace('\\', '/')
        candidates = [
            os.path.normpath(os.path.join(os.path.dirname(referenced_from), path)),
            os.path.normpath(os.path.join(self.base_path, path.lstrip('/'))),
        ]
        matches = self._find_by_basename(os.path.basename(path))
        if len(matches) == 1:
            candidates.append(matches[0])
        return candidates

    def _find_by_basename(self, filename: str) -> List[str]:
        if self._basename_index is None:
            index: Dict[str, List[str]] = {}
            for root, dirs, files in os.walk(self.base_path):
                dirs[:] = [d for d in dirs if not d.startswith('.')]
                for name in files:
                    index.setdefault(name, []).append(os.path.join(root, name))
            self._basename_index = index
        return self._basename_index.get(filename, [])

    def update_markdown_page_id(self, absolute_file_path: str, page_id: str, space_key: str) -> None:
        """Store a page's URL in the confluence_url field of its file.

        Paths that are not markdown files (folder pages) are ignored.

        Raises:
            FilesystemError: If the file cannot be rewritten
        """
        if not absolute_file_path.endswith(MARKDOWN_SUFFIX) or not os.path.isfile(absolute_file_path):
            logger.debug(f"No markdown file at {absolute_file_path}, not storing page {page_id}")
            return

        self._validate_path_safety(absolute_file_path, self.base_path)
        confluence_url = FrontmatterHandler.build_confluence_url(
            self.config.confluence_base_url, space_key, page_id
        )

        try:
            with open(absolute_file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise FilesystemError(absolute_file_path, 'read', str(e))

        updated = FrontmatterHandler.set_confluence_url(absolute_file_path, content, confluence_url)
        self._write_file_atomic(absolute_file_path, updated)
        logger.info(f"Stored page {page_id} in {self._relative_path(absolute_file_path)}")

    def _write_file_atomic(self, file_path: str, content: str) -> None:
        """Write a file via a temp file in the same directory and os.replace.

        Raises:
            FilesystemError: If the write fails (the original is left intact)
        """
        directory = os.path.dirname(file_path)
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=directory, prefix='.tmp-', suffix=MARKDOWN_SUFFIX, delete=False
            ) as f:
                temp_path = f.name
                f.write(content)
            os.replace(temp_path, file_path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as cleanup_error:
                    logger.warning(f"Failed to remove temp file {temp_path}: {cleanup_error}")
            raise FilesystemError(file_path, 'write', f"Atomic write failed: {e}")
