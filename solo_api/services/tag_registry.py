"""
Tag registry: resolve a tag name to the id of its single persisted Tag.

Функции принимают активную сессию явно и работают внутри транзакции
вызывающей стороны: ни commit, ни rollback здесь не делаются.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, ValidationError
from ..core.logging import get_logger
from ..models import Tag, utc_now
from ..repositories import TagRepository

logger = get_logger(__name__)


async def resolve_tag(db: AsyncSession, name: str) -> str:
    """
    Получить id тега по имени или создать тег, если имя встречается впервые.

    Args:
        db: Активная сессия (транзакция вызывающей стороны)
        name: Непустое имя тега, сравнивается точно (регистр и пробелы
            по краям значимы, имя не нормализуется)

    Returns:
        ID существующего или нового тега

    Raises:
        ValidationError: Пустое или пробельное имя
        ConflictError: Параллельная транзакция успела создать тег с тем же
            именем (UNIQUE на tags.name). Операцию можно повторить целиком.

    Существующий тег не изменяется (updated_at не трогается).
    """
    if not name or not name.strip():
        raise ValidationError("Tag name cannot be empty", field="name")

    repo = TagRepository(db)

    tag = await repo.get_by_name(name)
    if tag is not None:
        return tag.id

    now = utc_now()
    try:
        tag = await repo.create(Tag(name=name, created_at=now, updated_at=now))
    except IntegrityError as exc:
        # Проверка выше и INSERT не атомарны: проигравший в гонке получает
        # нарушение UNIQUE от самой БД.
        logger.warning("Tag name conflict", extra={"tag_name": name})
        raise ConflictError(f"Tag '{name}' was created concurrently, retry the operation") from exc

    logger.info("Tag created", extra={"tag_id": tag.id, "tag_name": name})
    return tag.id
