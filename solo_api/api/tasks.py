"""
API endpoints для работы с задачами.

Теги задачи передаются списком названий и создаются автоматически.
Доменные ошибки (NotFoundError, ValidationError, ...) обрабатываются
в api/errors.py, поэтому здесь нет try/except.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from ..schemas import ErrorResponse, TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from ..services import TaskService
from .dependencies import get_task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


# ============================================================================
# CREATE TASK
# ============================================================================


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации или неизвестный агент"},
        409: {"model": ErrorResponse, "description": "Конфликт при создании тега, повторите"},
    },
)
async def create_task(
    data: TaskCreate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """
    Создать новую задачу.

    Пример запроса:
    ```json
    {
        "title": "Настроить CI",
        "assignee": "alice",
        "tags": ["backend", "urgent"]
    }
    ```
    """
    return await service.create_task(
        title=data.title,
        description=data.description,
        status=data.status,
        assignee=data.assignee,
        project_id=data.project_id,
        tag_names=data.tags,
        agent_id=data.agent_id,
    )


# ============================================================================
# LIST TASKS
# ============================================================================


@router.get("", response_model=TaskListResponse, summary="Получить задачи")
async def get_tasks(
    project_id: str | None = Query(None, description="Фильтр по проекту"),
    skip: int = Query(0, ge=0, description="Пропустить N записей"),
    limit: int = Query(20, ge=1, le=100, description="Максимум записей"),
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """
    Получить задачи с пагинацией.

    ```
    GET /tasks
    GET /tasks?project_id=5b0e...&skip=0&limit=10
    ```
    """
    return await service.list_tasks(project_id=project_id, skip=skip, limit=limit)


# ============================================================================
# GET TASK BY ID
# ============================================================================


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Получить задачу по ID",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    return await service.get_task(task_id)


# ============================================================================
# UPDATE TASK
# ============================================================================


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Обновить задачу",
    description="""
    Частичное обновление задачи: пустые и отсутствующие поля не меняются.

    tags:
    - не передано или null - теги не меняются
    - [] - все теги удаляются
    - ["a", "b"] - теги заменяются целиком
    """,
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def update_task(
    task_id: str, data: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    # data.tags is None when the key is absent or null; [] survives as an empty list
    return await service.update_task(
        task_id=task_id,
        title=data.title,
        description=data.description,
        status=data.status,
        assignee=data.assignee,
        project_id=data.project_id,
        tag_names=data.tags,
        agent_id=data.agent_id,
    )


# ============================================================================
# DELETE TASK
# ============================================================================


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить задачу",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    """Удалить задачу и её связи с тегами. Теги остаются."""
    await service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
