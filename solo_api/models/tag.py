"""Tag model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

TAG_NAME_MAX_LENGTH = 100


class Tag(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Tag shared between tasks.

    name уникален во всей системе (UNIQUE на уровне БД), регистр учитывается.
    Тег живёт независимо от задач: удаление последней связи его не удаляет.
    """

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(TAG_NAME_MAX_LENGTH), unique=True, nullable=False)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)  # hex color

    # Relationships (read-only: связи пишет только reconciler)
    tasks: Mapped[list["Task"]] = relationship(
        "Task", secondary="task_tags", back_populates="tags", viewonly=True
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
