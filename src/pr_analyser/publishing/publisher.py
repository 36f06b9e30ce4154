"""
Task Publisher

Persists findings as review tasks anchored to the tracking comment.
"""

import logging
from typing import List, Sequence

from ..bitbucket.client import BitbucketClient
from ..models.review import Finding, ReviewRef, Task, TaskState, TrackingComment
from .store import TrackingCommentStore


logger = logging.getLogger(__name__)

DEFAULT_TRACKING_COMMENT_TEXT = '_Auto-generated comment from PR Analyser_'


class MissingTrackingComment(RuntimeError):
    """The tracking comment could not be found after creating it"""
    def __init__(self, ref: ReviewRef, text: str):
        super().__init__(f"Tracking comment {text!r} not found on {ref} after creation")
        self.ref = ref
        self.text = text


class TaskPublisher:
    """
    Find-or-create of the tracking comment and sequential task creation.

    The comment is identified by its exact text, so no state other than the
    review server itself is needed to find it again.
    """

    def __init__(
        self,
        client: BitbucketClient,
        store: TrackingCommentStore,
        comment_text: str = DEFAULT_TRACKING_COMMENT_TEXT,
    ):
        self.client = client
        self.store = store
        self.comment_text = comment_text

    def ensure_tracking_comment(self, ref: ReviewRef) -> TrackingComment:
        """
        Return the tracking comment, creating it if absent.

        The create response is never trusted: after creating, the activity
        feed is read again and the comment must be found there.

        Raises:
            MissingTrackingComment: If the comment is still absent after creation
        """
        comment = self.store.find(ref, self.comment_text)
        if comment is not None:
            return comment

        logger.info(f"No tracking comment on {ref}, creating one")
        self.store.create(ref, self.comment_text)

        comment = self.store.find(ref, self.comment_text)
        if comment is None:
            raise MissingTrackingComment(ref, self.comment_text)

        logger.info(f"Created tracking comment {comment.id} on {ref}")
        return comment

    def publish(self, ref: ReviewRef, comment: TrackingComment, findings: Sequence[Finding]) -> List[Task]:
        """
        Create one OPEN task per finding, in the given order.

        Each request completes before the next is issued, so creation order on
        the server matches `findings` order.

        Args:
            ref: Pull request reference
            comment: Anchor comment
            findings: Findings in publish order

        Returns:
            The created tasks, in creation order
        """
        tasks = []
        for finding in findings:
            self.client.create_task(ref, comment.id, finding.message, state=TaskState.OPEN.value)
            tasks.append(Task(text=finding.message, state=TaskState.OPEN, anchor_comment_id=comment.id))

        logger.info(f"Published {len(tasks)} tasks to comment {comment.id} on {ref}")
        return tasks
