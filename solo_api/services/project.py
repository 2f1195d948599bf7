"""Project service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Project, utc_now
from ..repositories import ProjectRepository
from ..schemas import ProjectListResponse, ProjectResponse
from .agent import check_agent_reference
from .unit_of_work import unit_of_work

logger = get_logger(__name__)


class ProjectService:
    """
    Сервис для работы с проектами.

    Задачи ссылаются на проект по project_id без проверки, поэтому
    удаление проекта их не затрагивает.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.project_repo = ProjectRepository(db)

    async def create_project(
        self,
        name: str,
        directory: str,
        description: str | None = None,
        agent_id: str | None = None,
    ) -> ProjectResponse:
        """
        Создать проект.

        Бизнес-правила:
        1. Название и директория обязательны и не пустые
        2. agent_id, если указан, должен существовать

        Raises:
            ValidationError: Пустое название/директория или неизвестный агент
        """
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty", field="name")
        if not directory or not directory.strip():
            raise ValidationError("Project directory cannot be empty", field="directory")
        await check_agent_reference(self.db, agent_id)

        async with unit_of_work(self.db):
            project = await self.project_repo.create(
                Project(
                    name=name.strip(),
                    directory=directory.strip(),
                    description=description or "",
                    agent_id=agent_id or None,
                )
            )

        logger.info("Project created", extra={"project_id": project.id, "agent_id": agent_id})
        return await self.get_project(project.id)

    async def get_project(self, project_id: str) -> ProjectResponse:
        """
        Получить проект по ID (вместе с агентом).

        Raises:
            NotFoundError: Если проект не найден
        """
        project = await self.project_repo.get_by_id_with_agent(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return ProjectResponse.model_validate(project)

    async def list_projects(self, skip: int = 0, limit: int = 100) -> ProjectListResponse:
        projects = await self.project_repo.get_all_with_agent(skip=skip, limit=limit)
        total = await self.project_repo.count()
        return ProjectListResponse(
            projects=[ProjectResponse.model_validate(p) for p in projects], total=total
        )

    async def update_project(
        self,
        project_id: str,
        name: str | None = None,
        description: str | None = None,
        directory: str | None = None,
        agent_id: str | None = None,
    ) -> ProjectResponse:
        """
        Частично обновить проект: None и "" не меняют поле.

        Raises:
            NotFoundError: Проект не найден
            ValidationError: Неизвестный агент
        """
        await check_agent_reference(self.db, agent_id)

        async with unit_of_work(self.db):
            project = await self.project_repo.get_by_id(project_id)
            if project is None:
                raise NotFoundError("Project", project_id)

            if name and name.strip():
                project.name = name.strip()
            if description:
                project.description = description
            if directory and directory.strip():
                project.directory = directory.strip()
            if agent_id:
                project.agent_id = agent_id
            project.updated_at = utc_now()

        logger.info("Project updated", extra={"project_id": project_id})
        return await self.get_project(project_id)

    async def delete_project(self, project_id: str) -> None:
        """
        Удалить проект. Задачи с этим project_id остаются как есть.

        Raises:
            NotFoundError: Проект не найден
        """
        async with unit_of_work(self.db):
            deleted = await self.project_repo.delete(project_id)
            if not deleted:
                raise NotFoundError("Project", project_id)

        logger.info("Project deleted", extra={"project_id": project_id})
