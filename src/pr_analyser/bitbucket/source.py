"""
Change Source

Retrieves the changed files of a pull request and their normalized diffs.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models.review import ChangedFile, ReviewRef
from .client import BitbucketClient
from .parser import DiffNormalizer


logger = logging.getLogger(__name__)


class ChangeSource:
    """
    Change set retrieval.

    Files are fetched one at a time, each diff awaited before the next request,
    so the resulting sequence follows the server's listing order. Errors
    propagate: a partial change set is never returned.
    """

    def __init__(self, client: BitbucketClient, normalizer: Optional[DiffNormalizer] = None, page_limit: int = 500):
        self.client = client
        self.normalizer = normalizer or DiffNormalizer()
        self.page_limit = page_limit

    def list_changed_files(self, ref: ReviewRef) -> List[ChangedFile]:
        """
        List files changed in the pull request, without diff content.

        Args:
            ref: Pull request reference

        Returns:
            ChangedFile objects with empty `lines`
        """
        files = []
        start = 0

        while True:
            raw_page = self.client.get_changes_page(ref, start=start, limit=self.page_limit)
            page_files, next_start = self.normalizer.parse_changes_page(raw_page)
            files.extend(page_files)

            if next_start is None or next_start <= start:
                break
            start = next_start

        logger.info(f"Found {len(files)} changed files in {ref}")
        return files

    def fetch_file_diff(self, ref: ReviewRef, path: str) -> Dict[str, Any]:
        """Raw diff structure for one file."""
        return self.client.get_file_diff(ref, path)

    def fetch_changes(self, ref: ReviewRef) -> List[ChangedFile]:
        """
        Fetch the full change set: every changed file with its line edits.

        Args:
            ref: Pull request reference

        Returns:
            ChangedFile objects in listing order with `lines` populated
        """
        files = self.list_changed_files(ref)

        for changed_file in files:
            raw_diff = self.fetch_file_diff(ref, changed_file.path)
            changed_file.lines = self.normalizer.normalize(raw_diff)
            logger.debug(f"{changed_file.path}: {len(changed_file.lines)} line edits")

        return files
