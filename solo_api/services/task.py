"""Task service with business logic."""

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import DEFAULT_STATUS, Task, utc_now
from ..repositories import TaskRepository
from ..schemas import AgentResponse, TaskListResponse, TaskResponse
from .agent import check_agent_reference
from .reconciler import reconcile
from .unit_of_work import unit_of_work

logger = get_logger(__name__)


def task_to_response(task: Task) -> TaskResponse:
    """
    Собрать внешнее представление задачи.

    tags - проекция связей task_tags -> Tag.name в порядке position.
    Если связи не загружены, tags == [] (никогда не None), agent == None.
    """
    unloaded = inspect(task).unloaded
    if "tags" in unloaded:
        tag_names: list[str] = []
    else:
        tag_names = [tag.name for tag in task.tags]

    agent = None
    if "agent" not in unloaded and task.agent is not None:
        agent = AgentResponse.model_validate(task.agent)

    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        assignee=task.assignee,
        project_id=task.project_id,
        agent_id=task.agent_id,
        agent=agent,
        tags=tag_names,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


class TaskService:
    """
    Сервис для работы с задачами.

    Каждая изменяющая операция - один unit of work: строка задачи и её
    связи с тегами либо коммитятся вместе, либо не коммитятся вовсе.
    После commit задача перечитывается и возвращается как TaskResponse.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.task_repo = TaskRepository(db)

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        status: str | None = None,
        assignee: str | None = None,
        project_id: str | None = None,
        tag_names: list[str] | None = None,
        agent_id: str | None = None,
    ) -> TaskResponse:
        """
        Создать задачу и задать её начальный набор тегов.

        Args:
            title: Название (обязательно)
            description: Описание
            status: Статус, по умолчанию "todo"
            assignee: Исполнитель
            project_id: ID проекта (не проверяется)
            tag_names: Названия тегов; None и [] - задача без тегов
            agent_id: ID назначенного агента (должен существовать)

        Raises:
            ValidationError: Пустое название или неизвестный агент (до открытия транзакции)
            ConflictError: Гонка при создании тега
            StorageError: Любая другая ошибка БД

        При ошибке ничего не остаётся в БД: ни задачи, ни тегов.
        """
        if not title or not title.strip():
            raise ValidationError("Task title cannot be empty", field="title")
        await check_agent_reference(self.db, agent_id)

        task = Task(
            title=title.strip(),
            description=description or "",
            status=status or DEFAULT_STATUS,
            assignee=assignee or "",
            project_id=project_id or "",
            agent_id=agent_id or None,
        )

        async with unit_of_work(self.db):
            task = await self.task_repo.create(task)
            # Создание всегда задаёт набор тегов, в том числе пустой
            tag_ids = await reconcile(self.db, task.id, tag_names or [])

        logger.info(
            "Task created",
            extra={"task_id": task.id, "project_id": task.project_id, "tag_count": len(tag_ids)},
        )
        return await self.get_task(task.id)

    async def get_task(self, task_id: str) -> TaskResponse:
        """
        Получить задачу по ID.

        Raises:
            NotFoundError: Если задача не найдена
        """
        task = await self.task_repo.get_by_id_full(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task_to_response(task)

    async def list_tasks(
        self, project_id: str | None = None, skip: int = 0, limit: int = 20
    ) -> TaskListResponse:
        """Получить задачи (опционально одного проекта) и их общее количество."""
        tasks = await self.task_repo.get_filtered(project_id=project_id, skip=skip, limit=limit)
        total = await self.task_repo.count_filtered(project_id=project_id)
        return TaskListResponse(tasks=[task_to_response(t) for t in tasks], total=total)

    async def update_task(
        self,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        assignee: str | None = None,
        project_id: str | None = None,
        tag_names: list[str] | None = None,
        agent_id: str | None = None,
    ) -> TaskResponse:
        """
        Частично обновить задачу.

        Бизнес-правила:
        1. None и "" - поле не меняется
        2. updated_at обновляется всегда
        3. tag_names=None - теги не трогаются,
           tag_names=[] - все теги удаляются,
           tag_names=[...] - набор тегов заменяется целиком

        Raises:
            NotFoundError: Если задача не найдена
            ValidationError: Неизвестный агент
        """
        await check_agent_reference(self.db, agent_id)

        async with unit_of_work(self.db):
            task = await self.task_repo.get_by_id(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)

            if title and title.strip():
                task.title = title.strip()
            if description:
                task.description = description
            if status:
                task.status = status
            if assignee:
                task.assignee = assignee
            if project_id:
                task.project_id = project_id
            if agent_id:
                task.agent_id = agent_id
            task.updated_at = utc_now()
            await self.db.flush()

            if tag_names is not None:
                await reconcile(self.db, task_id, tag_names)

        logger.info(
            "Task updated",
            extra={"task_id": task_id, "tags_replaced": tag_names is not None},
        )
        return await self.get_task(task_id)

    async def delete_task(self, task_id: str) -> None:
        """
        Удалить задачу вместе со всеми её связями с тегами.

        Связи удаляются явно перед удалением строки задачи (плюс
        ON DELETE CASCADE в БД). Сами теги остаются.

        Raises:
            NotFoundError: Если не удалено ни одной строки
        """
        async with unit_of_work(self.db):
            await self.task_repo.delete_associations(task_id)
            deleted = await self.task_repo.delete(task_id)
            if not deleted:
                raise NotFoundError("Task", task_id)

        logger.info("Task deleted", extra={"task_id": task_id})
