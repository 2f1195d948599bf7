"""
Pytest fixtures для тестов.

Предоставляет:
- test_engine: изолированная SQLite in-memory БД (с PRAGMA foreign_keys=ON)
- test_db: сессия для тестов сервисов и репозиториев
- task_tag_ids / task_tag_names: чтение связей задачи прямо из task_tags
- test_client: HTTP клиент для тестирования API endpoints
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from solo_api.api.dependencies import get_db
from solo_api.core.config import settings
from solo_api.core.database import create_engine_for
from solo_api.main import app
from solo_api.models import Base, Tag, task_tags

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Async engine для тестовой БД (SQLite in-memory).

    Для :memory: create_engine_for берёт StaticPool - одно соединение на весь
    тест, иначе in-memory данные теряются. Таблицы создаются заново для каждого теста.
    """
    engine = create_engine_for(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Фабрика сессий с теми же настройками, что и в приложении."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def test_db(session_factory):
    """Async session для работы с тестовой БД. Каждый тест получает чистую БД."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def task_tag_ids(test_db):
    """Прочитать tag_id связей задачи из task_tags в порядке position."""

    async def read(task_id: str) -> list[str]:
        result = await test_db.execute(
            select(task_tags.c.tag_id)
            .where(task_tags.c.task_id == task_id)
            .order_by(task_tags.c.position)
        )
        return list(result.scalars().all())

    return read


@pytest.fixture
def task_tag_names(test_db):
    """Прочитать имена тегов задачи из task_tags в порядке position."""

    async def read(task_id: str) -> list[str]:
        result = await test_db.execute(
            select(Tag.name)
            .join(task_tags, Tag.id == task_tags.c.tag_id)
            .where(task_tags.c.task_id == task_id)
            .order_by(task_tags.c.position)
        )
        return list(result.scalars().all())

    return read


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTP клиент для тестирования API endpoints.

    get_db подменяется на сессию тестовой БД, ключ API передаётся в заголовке.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-API-Key": settings.API_KEY},
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
