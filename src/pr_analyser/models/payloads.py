"""
Review Server Payload Models

Pydantic models validating the JSON returned by the review server REST API.
Only the fields the analyser reads are declared; everything else is ignored.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, validator


class PathPayload(BaseModel):
    """`path` object of a change entry."""
    to_string: str = Field(alias='toString')
    name: str = ''
    extension: Optional[str] = None

    @validator('to_string')
    def validate_path(cls, v):
        if not v:
            raise ValueError('Path cannot be empty')
        return v


class ChangePayload(BaseModel):
    """Single entry of the changes listing."""
    path: PathPayload


class ChangesPage(BaseModel):
    """One page of the changes listing."""
    values: List[ChangePayload] = []
    is_last_page: bool = Field(True, alias='isLastPage')
    next_page_start: Optional[int] = Field(None, alias='nextPageStart')


class DiffLinePayload(BaseModel):
    line: str = ''


class SegmentPayload(BaseModel):
    """Contiguous run of lines sharing one change type."""
    type: str
    lines: List[DiffLinePayload] = []

    @validator('type')
    def validate_type(cls, v):
        v = v.upper()
        if v not in {'ADDED', 'REMOVED', 'CONTEXT'}:
            raise ValueError(f'Unknown segment type: {v}')
        return v


class HunkPayload(BaseModel):
    segments: List[SegmentPayload] = []


class FileDiffPayload(BaseModel):
    hunks: Optional[List[HunkPayload]] = None


class DiffPayload(BaseModel):
    """Response of the per-file diff endpoint."""
    diffs: Optional[List[FileDiffPayload]] = None


class TaskPayload(BaseModel):
    text: str = ''
    state: str = 'OPEN'


class CommentPayload(BaseModel):
    id: int
    text: str = ''
    tasks: List[TaskPayload] = []


class ActivityPayload(BaseModel):
    """Activity feed entry; only comment activities carry `comment`."""
    comment: Optional[CommentPayload] = None


class ActivitiesPage(BaseModel):
    values: List[ActivityPayload] = []
