"""Agent model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Agent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Исполнитель (человек или AI-агент), которого можно назначить задаче или проекту.

    name уникален. Удаление агента не удаляет задачи и проекты:
    их agent_id обнуляется (ON DELETE SET NULL).
    """

    __tablename__ = "agents"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, name='{self.name}', type={self.type})>"
