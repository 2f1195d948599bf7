"""Project repository with specific queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Project
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """
    Репозиторий для работы с проектами.

    Проект всегда читается вместе с агентом: lazy load в async сессии недоступен.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    async def get_by_id_with_agent(self, id: str) -> Project | None:
        """
        Получить проект с назначенным агентом (eager loading).

        SQL эквивалент:
            SELECT projects.*, agents.*
            FROM projects
            LEFT JOIN agents ON agents.id = projects.agent_id
            WHERE projects.id = {id};
        """
        result = await self.db.execute(
            select(Project)
            .options(selectinload(Project.agent))
            .where(Project.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_with_agent(self, skip: int = 0, limit: int = 100) -> list[Project]:
        """Проекты в порядке создания, с агентами."""
        result = await self.db.execute(
            select(Project)
            .options(selectinload(Project.agent))
            .order_by(Project.created_at, Project.id)
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
