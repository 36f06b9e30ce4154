"""
Review Data Models

Pull request change set, findings and task data models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class ReviewRef:
    """Identifies one pull request on the review server."""
    project: str
    repo: str
    pr_id: int

    def __post_init__(self):
        """데이터 검증"""
        if not self.project or not self.repo:
            raise ValueError("Project key and repository slug are required")
        if self.pr_id <= 0:
            raise ValueError("Pull request id must be positive")

    @classmethod
    def from_url(cls, url: str) -> "ReviewRef":
        """
        Build a reference from a pull request page URL.

        Accepts paths shaped like
        ``/projects/{project}/repos/{repo}/pull-requests/{id}/overview``.
        """
        parts = urlparse(url).path.split('/')
        if (
            len(parts) < 7
            or parts[1] != 'projects'
            or parts[3] != 'repos'
            or parts[5] != 'pull-requests'
        ):
            raise ValueError(f"Not a pull request URL: {url}")

        try:
            pr_id = int(parts[6])
        except ValueError:
            raise ValueError(f"Invalid pull request id in URL: {url}")

        return cls(project=parts[2], repo=parts[4], pr_id=pr_id)

    @property
    def path(self) -> str:
        """REST path prefix for this pull request."""
        return f"/projects/{self.project}/repos/{self.repo}/pull-requests/{self.pr_id}"

    def __str__(self) -> str:
        return f"{self.project}/{self.repo}#{self.pr_id}"


class ChangeKind(Enum):
    """Kind of a single diff line."""
    ADDED = "ADDED"
    REMOVED = "REMOVED"
    CONTEXT = "CONTEXT"


@dataclass(frozen=True)
class LineEdit:
    """One line of a file diff."""
    kind: ChangeKind
    text: str


@dataclass
class ChangedFile:
    """파일 변경사항"""
    path: str
    name: str
    extension: str
    lines: List[LineEdit] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("File path cannot be empty")
        self.extension = (self.extension or '').lower().lstrip('.')

    @property
    def added_lines(self) -> List[str]:
        """Text of every ADDED line, in diff order."""
        return [edit.text for edit in self.lines if edit.kind is ChangeKind.ADDED]


@dataclass(frozen=True)
class Finding:
    """Advisory observation produced by an analyzer."""
    message: str
    analyzer: Optional[str] = None

    def __post_init__(self):
        if not self.message.strip():
            raise ValueError("Finding message cannot be empty")


class TaskState(Enum):
    """Task lifecycle state on the review server."""
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True)
class Task:
    """Review task anchored to a comment."""
    text: str
    state: TaskState = TaskState.OPEN
    anchor_comment_id: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.state is TaskState.RESOLVED


@dataclass
class TrackingComment:
    """The single comment that anchors all generated tasks."""
    id: int
    text: str
    tasks: List[Task] = field(default_factory=list)
