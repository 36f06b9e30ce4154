"""
Task Publishing

Tracking comment lookup and review task creation.
"""

from .store import TrackingCommentStore, BitbucketTrackingCommentStore
from .publisher import TaskPublisher, MissingTrackingComment, DEFAULT_TRACKING_COMMENT_TEXT

__all__ = [
    'TrackingCommentStore',
    'BitbucketTrackingCommentStore',
    'TaskPublisher',
    'MissingTrackingComment',
    'DEFAULT_TRACKING_COMMENT_TEXT',
]
