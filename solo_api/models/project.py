"""Project model."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .agent import Agent
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Project(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Project: рабочая директория и (опционально) назначенный агент.

    Задачи ссылаются на проект через Task.project_id без внешнего ключа,
    поэтому удаление проекта задачи не трогает.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    directory: Mapped[str] = mapped_column(String(500), nullable=False)
    agent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("agents.id", ondelete="SET NULL"), nullable=True, index=True
    )

    agent: Mapped[Agent | None] = relationship(Agent)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}')>"
