"""Task model."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .agent import Agent
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .task_tag import task_tags

DEFAULT_STATUS = "todo"


class Task(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Task model. Status is a free-form string."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_STATUS, server_default=DEFAULT_STATUS, nullable=False
    )
    assignee: Mapped[str] = mapped_column(String(200), default="", nullable=False)

    # Opaque reference: not validated against a projects table
    project_id: Mapped[str] = mapped_column(String(36), default="", nullable=False, index=True)

    # Назначенный агент; при удалении агента ссылка обнуляется
    agent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("agents.id", ondelete="SET NULL"), nullable=True, index=True
    )
    agent: Mapped[Agent | None] = relationship(Agent)

    # Tags relationship (many-to-many), ordered as supplied.
    # viewonly: associations are written only through TaskRepository
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=task_tags,
        back_populates="tasks",
        order_by=task_tags.c.position,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status})>"
