"""Tag repository with specific queries."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Tag, task_tags
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """
    Репозиторий для работы с тегами.

    Создание тегов по имени живёт в services/tag_registry.py,
    здесь только запросы.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Получить тег по точному имени (с учётом регистра).

        SQL эквивалент:
            SELECT * FROM tags WHERE name = {name};
        """
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_all_with_usage(self) -> list[tuple[Tag, int]]:
        """
        Получить все теги с количеством задач, отсортированные по имени.

        SQL эквивалент:
            SELECT tags.*, COUNT(task_tags.task_id) AS usage_count
            FROM tags
            LEFT JOIN task_tags ON tags.id = task_tags.tag_id
            GROUP BY tags.id
            ORDER BY tags.name;
        """
        usage_count = func.count(task_tags.c.task_id).label("usage_count")
        result = await self.db.execute(
            select(Tag, usage_count)
            .outerjoin(task_tags, Tag.id == task_tags.c.tag_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_usage_count(self, tag_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(task_tags).where(task_tags.c.tag_id == tag_id)
        )
        return result.scalar_one()

    async def get_unused_tags(self) -> list[Tag]:
        """
        Получить теги без единой связи с задачей.

        Теги не удаляются автоматически, этот запрос только показывает их.

        SQL эквивалент:
            SELECT tags.*
            FROM tags
            LEFT JOIN task_tags ON tags.id = task_tags.tag_id
            WHERE task_tags.tag_id IS NULL;
        """
        result = await self.db.execute(
            select(Tag)
            .outerjoin(task_tags, Tag.id == task_tags.c.tag_id)
            .where(task_tags.c.tag_id.is_(None))
            .order_by(Tag.name)
        )
        return list(result.scalars().all())
