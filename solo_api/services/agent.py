"""Agent service with business logic."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Agent, utc_now
from ..repositories import AgentRepository
from ..schemas import AgentListResponse, AgentResponse
from .unit_of_work import unit_of_work

logger = get_logger(__name__)


async def check_agent_reference(db: AsyncSession, agent_id: str | None) -> None:
    """
    Проверить, что agent_id (если передан) указывает на существующего агента.

    Используется задачами и проектами до открытия unit of work:
    иначе несуществующий id упал бы на внешнем ключе как StorageError.
    """
    if agent_id and await AgentRepository(db).get_by_id(agent_id) is None:
        raise ValidationError(f"Agent with id={agent_id} does not exist", field="agent_id")


class AgentService:
    """
    Сервис для работы с агентами.

    Бизнес-правила:
    - name и type обязательны, name уникален
    - удаление агента не удаляет его задачи и проекты (agent_id -> NULL)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.agent_repo = AgentRepository(db)

    async def create_agent(self, name: str, type: str, description: str | None = None) -> AgentResponse:
        """
        Создать агента.

        Raises:
            ValidationError: Пустое имя или тип
            ConflictError: Агент с таким именем уже есть
        """
        if not name or not name.strip():
            raise ValidationError("Agent name cannot be empty", field="name")
        if not type or not type.strip():
            raise ValidationError("Agent type cannot be empty", field="type")

        name = name.strip()
        await self._check_name_free(name)

        async with unit_of_work(self.db):
            agent = await self._save_new(
                Agent(name=name, type=type.strip(), description=description or "")
            )

        logger.info("Agent created", extra={"agent_id": agent.id, "agent_name": name})
        return AgentResponse.model_validate(agent)

    async def list_agents(self) -> AgentListResponse:
        agents = await self.agent_repo.get_ordered()
        return AgentListResponse(
            agents=[AgentResponse.model_validate(a) for a in agents], total=len(agents)
        )

    async def get_agent(self, agent_id: str) -> AgentResponse:
        return AgentResponse.model_validate(await self._get_or_404(agent_id))

    async def update_agent(
        self,
        agent_id: str,
        name: str | None = None,
        type: str | None = None,
        description: str | None = None,
    ) -> AgentResponse:
        """
        Частично обновить агента: None и "" не меняют поле.

        Raises:
            NotFoundError: Агент не найден
            ConflictError: Новое имя занято другим агентом
        """
        async with unit_of_work(self.db):
            agent = await self._get_or_404(agent_id)

            if name and name.strip() and name.strip() != agent.name:
                await self._check_name_free(name.strip())
                agent.name = name.strip()
            if type and type.strip():
                agent.type = type.strip()
            if description:
                agent.description = description
            agent.updated_at = utc_now()

        logger.info("Agent updated", extra={"agent_id": agent_id})
        return AgentResponse.model_validate(agent)

    async def delete_agent(self, agent_id: str) -> None:
        """
        Удалить агента. Задачи и проекты остаются, их agent_id обнуляет БД.

        Raises:
            NotFoundError: Агент не найден
        """
        async with unit_of_work(self.db):
            deleted = await self.agent_repo.delete(agent_id)
            if not deleted:
                raise NotFoundError("Agent", agent_id)

        logger.info("Agent deleted", extra={"agent_id": agent_id})

    async def _get_or_404(self, agent_id: str) -> Agent:
        agent = await self.agent_repo.get_by_id(agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)
        return agent

    async def _check_name_free(self, name: str) -> None:
        if await self.agent_repo.get_by_name(name) is not None:
            raise ConflictError(f"Agent with name '{name}' already exists")

    async def _save_new(self, agent: Agent) -> Agent:
        try:
            return await self.agent_repo.create(agent)
        except IntegrityError as exc:
            raise ConflictError(f"Agent with name '{agent.name}' already exists") from exc
