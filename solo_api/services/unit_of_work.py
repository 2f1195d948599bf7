"""Scoped transaction helper for the service layer."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import StorageError
from ..core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Выполнить блок как одну транзакцию: commit при успехе, rollback при ЛЮБОЙ ошибке.

    - Ошибки SQLAlchemy превращаются в StorageError (исходная в __cause__)
    - Доменные ошибки (NotFoundError, ConflictError, ...) пробрасываются как есть
    - Ничего не проглатывается и не повторяется

    Использование:
        async with unit_of_work(self.db):
            await self.task_repo.create(task)
            await reconcile(self.db, task.id, tag_names)
        # здесь изменения уже закоммичены
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            "Unit of work rolled back: storage failure",
            extra={"error": type(exc).__name__},
            exc_info=True,
        )
        raise StorageError(f"Storage failure: {exc.__class__.__name__}") from exc
    except Exception as exc:
        await db.rollback()
        logger.warning("Unit of work rolled back", extra={"error": type(exc).__name__})
        raise
