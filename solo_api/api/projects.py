"""
API endpoints для работы с проектами.

Задачи ссылаются на проект через project_id и не удаляются вместе с ним.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from ..schemas import (
    ErrorResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from ..services import ProjectService
from .dependencies import get_project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать проект",
    responses={400: {"model": ErrorResponse, "description": "Ошибка валидации или неизвестный агент"}},
)
async def create_project(
    data: ProjectCreate, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    """
    Пример запроса:
    ```json
    {"name": "solo", "directory": "/home/alice/src/solo"}
    ```
    """
    return await service.create_project(
        name=data.name,
        directory=data.directory,
        description=data.description,
        agent_id=data.agent_id,
    )


@router.get("", response_model=ProjectListResponse, summary="Получить проекты")
async def get_projects(
    skip: int = Query(0, ge=0, description="Пропустить N записей"),
    limit: int = Query(100, ge=1, le=100, description="Максимум записей"),
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return await service.list_projects(skip=skip, limit=limit)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Получить проект по ID",
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def get_project(
    project_id: str, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    return await service.get_project(project_id)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Обновить проект",
    description="Частичное обновление: пустые и отсутствующие поля не меняются.",
    responses={
        400: {"model": ErrorResponse, "description": "Неизвестный агент"},
        404: {"model": ErrorResponse, "description": "Проект не найден"},
    },
)
async def update_project(
    project_id: str, data: ProjectUpdate, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    return await service.update_project(
        project_id=project_id,
        name=data.name,
        description=data.description,
        directory=data.directory,
        agent_id=data.agent_id,
    )


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить проект",
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def delete_project(
    project_id: str, service: ProjectService = Depends(get_project_service)
) -> Response:
    await service.delete_project(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
