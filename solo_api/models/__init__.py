"""SQLAlchemy models for Solo API."""

from .agent import Agent
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, new_id, utc_now
from .project import Project
from .tag import TAG_NAME_MAX_LENGTH, Tag
from .task import DEFAULT_STATUS, Task
from .task_tag import task_tags

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_id",
    "utc_now",
    "Agent",
    "Project",
    "Tag",
    "TAG_NAME_MAX_LENGTH",
    "Task",
    "DEFAULT_STATUS",
    "task_tags",
]
