"""Task-Tag association table."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from .base import Base

# Many-to-many association between tasks and tags.
# Identity is (task_id, tag_id), so a task holds each tag at most once.
# position keeps the order in which tag names were supplied.
task_tags = Table(
    "task_tags",
    Base.metadata,
    Column(
        "task_id",
        String(36),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column("position", Integer, nullable=False, default=0),
)
