"""Task-tag reconciliation: replace a task's whole tag set in one step."""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..repositories import TaskRepository
from .tag_registry import resolve_tag

logger = get_logger(__name__)


async def reconcile(db: AsyncSession, task_id: str, tag_names: Sequence[str] | None) -> list[str]:
    """
    Заменить набор тегов задачи на tag_names.

    Это полная замена, а не diff:
    1. DELETE всех связей задачи
    2. Пустой список (или None) - задача остаётся без тегов
    3. Каждое непустое имя (как есть, без strip) -> resolve_tag();
       пустые и пробельные имена пропускаются; повторы id отбрасываются,
       порядок первого появления сохраняется
    4. INSERT одной связи на каждый id

    Выполняется внутри транзакции вызывающей стороны (unit_of_work):
    любая ошибка прерывает операцию, откат делает владелец транзакции.

    Returns:
        Список id тегов задачи в порядке входных имён
    """
    task_repo = TaskRepository(db)

    removed = await task_repo.delete_associations(task_id)

    tag_ids: list[str] = []
    for name in tag_names or ():
        # Пробелы важны только для проверки на пустоту: имя хранится как есть
        if not name.strip():
            continue

        tag_id = await resolve_tag(db, name)
        if tag_id not in tag_ids:
            tag_ids.append(tag_id)

    await task_repo.insert_associations(task_id, tag_ids)

    logger.debug(
        "Task tags reconciled",
        extra={"task_id": task_id, "removed": removed, "tag_count": len(tag_ids)},
    )
    return tag_ids
