"""
Tracking Comment Store

Lookup and creation of the tracking comment on the review server.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..bitbucket.client import BitbucketClient
from ..bitbucket.parser import DiffNormalizer
from ..models.review import ReviewRef, TrackingComment


logger = logging.getLogger(__name__)


class TrackingCommentStore(ABC):
    """Find and create comments identified by their exact text."""

    @abstractmethod
    def find(self, ref: ReviewRef, text: str) -> Optional[TrackingComment]:
        """Return the comment whose text equals `text`, or None."""

    @abstractmethod
    def create(self, ref: ReviewRef, text: str) -> None:
        """Create a comment. The response is not used."""


class BitbucketTrackingCommentStore(TrackingCommentStore):
    """Tracking comments read from the pull request activity feed."""

    def __init__(self, client: BitbucketClient, normalizer: Optional[DiffNormalizer] = None, activities_limit: int = 500):
        self.client = client
        self.normalizer = normalizer or DiffNormalizer()
        self.activities_limit = activities_limit

    def find(self, ref: ReviewRef, text: str) -> Optional[TrackingComment]:
        activities = self.client.get_activities(ref, limit=self.activities_limit)
        comment = self.normalizer.find_comment(activities, text)
        if comment:
            logger.debug(f"Found tracking comment {comment.id} on {ref} with {len(comment.tasks)} tasks")
        return comment

    def create(self, ref: ReviewRef, text: str) -> None:
        self.client.create_comment(ref, text)
