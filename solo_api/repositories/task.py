"""Task repository: task queries and association table operations."""

from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Task, task_tags
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """
    Репозиторий для работы с задачами.

    Кроме запросов к tasks, здесь живут ВСЕ операции с таблицей связей
    task_tags: только этот класс пишет в неё (через Core insert/delete),
    relationship Task.tags используется лишь для чтения.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    async def get_by_id_full(self, id: str) -> Task | None:
        """
        Получить задачу вместе с тегами и агентом (eager loading).

        populate_existing: сессия живёт с expire_on_commit=False, поэтому
        уже загруженная задача могла бы вернуться со старым списком тегов.
        """
        result = await self.db.execute(
            select(Task)
            .options(selectinload(Task.tags), selectinload(Task.agent))
            .where(Task.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        project_id: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[Task]:
        """
        Получить задачи (с тегами и агентом) с фильтром по проекту и пагинацией.

        SQL эквивалент:
            SELECT * FROM tasks
            WHERE project_id = {project_id}  -- если указан
            ORDER BY created_at, id
            OFFSET {skip} LIMIT {limit};
        """
        query = select(Task).options(selectinload(Task.tags), selectinload(Task.agent))
        if project_id is not None:
            query = query.where(Task.project_id == project_id)

        query = query.order_by(Task.created_at, Task.id).offset(skip).limit(limit)
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def count_filtered(self, project_id: str | None = None) -> int:
        query = select(func.count()).select_from(Task)
        if project_id is not None:
            query = query.where(Task.project_id == project_id)
        result = await self.db.execute(query)
        return result.scalar_one()

    # ------------------------------------------------------------------
    # Association table (task_tags)
    # ------------------------------------------------------------------

    async def delete_associations(self, task_id: str) -> int:
        """
        Удалить все связи задачи с тегами. Сами теги не трогаются.

        SQL эквивалент:
            DELETE FROM task_tags WHERE task_id = {task_id};
        """
        result = await self.db.execute(delete(task_tags).where(task_tags.c.task_id == task_id))
        return result.rowcount

    async def insert_associations(self, task_id: str, tag_ids: Sequence[str]) -> None:
        """
        Вставить по одной связи на каждый tag_id, сохраняя порядок в position.

        tag_ids должны быть уже без дубликатов: повтор нарушит первичный
        ключ (task_id, tag_id).
        """
        if not tag_ids:
            return

        await self.db.execute(
            insert(task_tags),
            [
                {"task_id": task_id, "tag_id": tag_id, "position": position}
                for position, tag_id in enumerate(tag_ids)
            ],
        )
