"""
API endpoints для работы с тегами.

Теги создаются автоматически при сохранении задач, поэтому здесь
только чтение и цвет.
"""

from fastapi import APIRouter, Depends

from ..schemas import ErrorResponse, TagResponse, TagUpdate, TagWithUsage
from ..services import TagService
from .dependencies import get_tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagWithUsage], summary="Получить все теги")
async def get_tags(service: TagService = Depends(get_tag_service)) -> list[TagWithUsage]:
    """
    Все теги с количеством задач.

    ```json
    [
        {"id": "...", "name": "backend", "color": null, "usage_count": 3, ...},
        {"id": "...", "name": "urgent", "color": "#FF0000", "usage_count": 0, ...}
    ]
    ```
    """
    return await service.get_tags_with_usage()


@router.get(
    "/unused",
    response_model=list[TagResponse],
    summary="Получить неиспользуемые теги",
    description="Теги без задач. Они не удаляются автоматически.",
)
async def get_unused_tags(service: TagService = Depends(get_tag_service)) -> list[TagResponse]:
    tags = await service.get_unused_tags()
    return [TagResponse.model_validate(t) for t in tags]


@router.get(
    "/{tag_id}",
    response_model=TagWithUsage,
    summary="Получить тег по ID",
    responses={404: {"model": ErrorResponse, "description": "Тег не найден"}},
)
async def get_tag(tag_id: str, service: TagService = Depends(get_tag_service)) -> TagWithUsage:
    return await service.get_tag_with_usage(tag_id)


@router.patch(
    "/{tag_id}",
    response_model=TagResponse,
    summary="Изменить цвет тега",
    responses={404: {"model": ErrorResponse, "description": "Тег не найден"}},
)
async def update_tag(
    tag_id: str, data: TagUpdate, service: TagService = Depends(get_tag_service)
) -> TagResponse:
    """
    Пример запроса:
    ```json
    {"color": "#3B82F6"}
    ```
    """
    tag = await service.set_color(tag_id, data.color)
    return TagResponse.model_validate(tag)
