"""
Data Models

Core data models shared by the change source, analyzers and task publisher.
"""

from .review import (
    ReviewRef,
    ChangeKind,
    LineEdit,
    ChangedFile,
    Finding,
    TaskState,
    Task,
    TrackingComment,
)

__all__ = [
    "ReviewRef",
    "ChangeKind",
    "LineEdit",
    "ChangedFile",
    "Finding",
    "TaskState",
    "Task",
    "TrackingComment",
]
