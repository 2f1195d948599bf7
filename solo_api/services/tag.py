"""Tag service: read access to the shared tag table and display colors."""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Tag, utc_now
from ..repositories import TagRepository
from ..schemas import HEX_COLOR_PATTERN, TagWithUsage
from .unit_of_work import unit_of_work

logger = get_logger(__name__)


def _with_usage(tag: Tag, count: int) -> TagWithUsage:
    return TagWithUsage(
        id=tag.id,
        name=tag.name,
        color=tag.color,
        created_at=tag.created_at,
        updated_at=tag.updated_at,
        usage_count=count,
    )


class TagService:
    """
    Сервис для работы с тегами.

    Теги создаются только через tag_registry (при сохранении задачи),
    поэтому здесь нет create/rename/delete. Неиспользуемые теги
    можно посмотреть, но они не удаляются.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_repo = TagRepository(db)

    async def get_tag(self, tag_id: str) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def get_tag_with_usage(self, tag_id: str) -> TagWithUsage:
        """
        Тег с количеством задач, которые на него ссылаются.

        Raises:
            NotFoundError: Тег не найден
        """
        tag = await self.get_tag(tag_id)
        count = await self.tag_repo.get_usage_count(tag_id)
        return _with_usage(tag, count)

    async def get_tags_with_usage(self) -> list[TagWithUsage]:
        """Все теги (по имени) с количеством задач у каждого."""
        rows = await self.tag_repo.get_all_with_usage()
        return [_with_usage(tag, count) for tag, count in rows]

    async def get_unused_tags(self) -> list[Tag]:
        return await self.tag_repo.get_unused_tags()

    async def set_color(self, tag_id: str, color: str | None) -> Tag:
        """
        Задать или убрать (None) цвет тега.

        Raises:
            ValidationError: Цвет не в формате #RRGGBB
            NotFoundError: Тег не найден
        """
        if color is not None and not self._is_valid_hex_color(color):
            raise ValidationError(f"Invalid color format: {color}. Use #RRGGBB", field="color")

        async with unit_of_work(self.db):
            tag = await self.get_tag(tag_id)
            tag.color = color
            tag.updated_at = utc_now()

        logger.info("Tag color changed", extra={"tag_id": tag_id, "color": color})
        return tag

    @staticmethod
    def _is_valid_hex_color(color: str) -> bool:
        return bool(re.match(HEX_COLOR_PATTERN, color))
