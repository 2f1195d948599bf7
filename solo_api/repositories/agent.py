"""Agent repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Agent
from .base import BaseRepository


class AgentRepository(BaseRepository[Agent]):
    """Репозиторий для работы с агентами."""

    def __init__(self, db: AsyncSession):
        super().__init__(Agent, db)

    async def get_by_name(self, name: str) -> Agent | None:
        result = await self.db.execute(select(Agent).where(Agent.name == name))
        return result.scalar_one_or_none()

    async def get_ordered(self) -> list[Agent]:
        """
        Все агенты по имени.

        SQL эквивалент:
            SELECT * FROM agents ORDER BY name;
        """
        result = await self.db.execute(select(Agent).order_by(Agent.name))
        return list(result.scalars().all())
