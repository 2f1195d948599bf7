"""API endpoints для работы с агентами."""

from fastapi import APIRouter, Depends, Response, status

from ..schemas import AgentCreate, AgentListResponse, AgentResponse, AgentUpdate, ErrorResponse
from ..services import AgentService
from .dependencies import get_agent_service

router = APIRouter(prefix="/agents", tags=["agents"])


@router.post(
    "",
    response_model=AgentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать агента",
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        409: {"model": ErrorResponse, "description": "Агент с таким именем уже есть"},
    },
)
async def create_agent(
    data: AgentCreate, service: AgentService = Depends(get_agent_service)
) -> AgentResponse:
    """
    Пример запроса:
    ```json
    {"name": "claude", "type": "ai", "description": "Code review"}
    ```
    """
    return await service.create_agent(name=data.name, type=data.type, description=data.description)


@router.get("", response_model=AgentListResponse, summary="Получить всех агентов")
async def get_agents(service: AgentService = Depends(get_agent_service)) -> AgentListResponse:
    return await service.list_agents()


@router.get(
    "/{agent_id}",
    response_model=AgentResponse,
    summary="Получить агента по ID",
    responses={404: {"model": ErrorResponse, "description": "Агент не найден"}},
)
async def get_agent(agent_id: str, service: AgentService = Depends(get_agent_service)) -> AgentResponse:
    return await service.get_agent(agent_id)


@router.put(
    "/{agent_id}",
    response_model=AgentResponse,
    summary="Обновить агента",
    responses={
        404: {"model": ErrorResponse, "description": "Агент не найден"},
        409: {"model": ErrorResponse, "description": "Имя занято другим агентом"},
    },
)
async def update_agent(
    agent_id: str, data: AgentUpdate, service: AgentService = Depends(get_agent_service)
) -> AgentResponse:
    return await service.update_agent(
        agent_id=agent_id, name=data.name, type=data.type, description=data.description
    )


@router.delete(
    "/{agent_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить агента",
    responses={404: {"model": ErrorResponse, "description": "Агент не найден"}},
)
async def delete_agent(agent_id: str, service: AgentService = Depends(get_agent_service)) -> Response:
    """Задачи и проекты агента остаются, у них обнуляется agent_id."""
    await service.delete_agent(agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
