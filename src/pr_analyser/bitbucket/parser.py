"""
Diff Normalizer

Parses review server payloads into the structured change model.
Flattens file diffs into ordered line edits and extracts comments from
the activity feed.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from pydantic import ValidationError

from ..models.payloads import ActivitiesPage, ChangesPage, DiffPayload
from ..models.review import ChangedFile, ChangeKind, LineEdit, Task, TaskState, TrackingComment
from .client import PayloadError


logger = logging.getLogger(__name__)


class DiffNormalizer:
    """
    Parser for review server payloads.

    Converts raw JSON into ChangedFile, LineEdit and TrackingComment objects.
    Any payload that does not match the expected shape raises PayloadError.
    """

    def normalize(self, raw_diff: Optional[Dict[str, Any]]) -> List[LineEdit]:
        """
        Flatten a file diff into line edits.

        Walks diffs -> hunks -> segments -> lines, keeping line order and each
        segment's change kind. Diffs without hunks (binary, rename-only)
        contribute nothing.

        Args:
            raw_diff: Raw diff response, or None

        Returns:
            Ordered list of LineEdit objects
        """
        if not raw_diff:
            return []

        payload = self._validate(DiffPayload, raw_diff, 'diff')
        if not payload.diffs:
            return []

        edits = []
        for diff in payload.diffs:
            if not diff.hunks:
                continue
            for hunk in diff.hunks:
                for segment in hunk.segments:
                    kind = ChangeKind(segment.type)
                    edits.extend(LineEdit(kind=kind, text=item.line) for item in segment.lines)

        logger.debug(f"Normalized diff into {len(edits)} line edits")
        return edits

    def parse_changes_page(self, raw_page: Dict[str, Any]) -> Tuple[List[ChangedFile], Optional[int]]:
        """
        Parse one page of the changes listing.

        Args:
            raw_page: Raw changes page

        Returns:
            Tuple of (files without lines, next page start or None on the last page)
        """
        page = self._validate(ChangesPage, raw_page, 'changes')

        files = [
            ChangedFile(
                path=change.path.to_string,
                name=change.path.name,
                extension=change.path.extension or '',
            )
            for change in page.values
        ]

        next_start = None
        if not page.is_last_page and page.next_page_start is not None:
            next_start = page.next_page_start

        return files, next_start

    def find_comment(self, raw_activities: List[Dict[str, Any]], text: str) -> Optional[TrackingComment]:
        """
        Find the first comment whose text exactly equals `text`.

        Args:
            raw_activities: Raw activity records
            text: Comment text to match

        Returns:
            TrackingComment with its tasks, or None if absent
        """
        page = self._validate(ActivitiesPage, {'values': raw_activities}, 'activities')

        for activity in page.values:
            comment = activity.comment
            if comment is None or comment.text != text:
                continue

            tasks = [
                Task(text=task.text, state=self._task_state(task.state), anchor_comment_id=comment.id)
                for task in comment.tasks
            ]
            return TrackingComment(id=comment.id, text=comment.text, tasks=tasks)

        return None

    def _task_state(self, state: str) -> TaskState:
        try:
            return TaskState(state.upper())
        except ValueError:
            logger.warning(f"Unknown task state {state!r}, treating as OPEN")
            return TaskState.OPEN

    def _validate(self, model, raw: Any, what: str):
        try:
            return model(**raw)
        except (TypeError, ValidationError) as e:
            raise PayloadError(f"Unexpected {what} payload: {e}", response_data=raw)
