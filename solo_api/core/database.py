"""Database connection and session management."""

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings

# Сколько ждать снятия блокировки записи другим соединением (секунды)
SQLITE_BUSY_TIMEOUT = 30


def is_sqlite_memory(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def enable_sqlite_pragmas(engine: AsyncEngine, wal: bool = True) -> None:
    """
    Настроить каждое новое соединение SQLite.

    - foreign_keys=ON: иначе SQLite игнорирует FOREIGN KEY и ON DELETE CASCADE
    - journal_mode=WAL: читатели не блокируют писателя и наоборот
    - busy_timeout: параллельная запись ждёт, а не падает сразу с "database is locked"

    Для :memory: WAL не имеет смысла (wal=False).
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT * 1000}")
        cursor.close()


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """
    Создать async engine под конкретную БД.

    - SQLite :memory: - StaticPool, одно соединение (иначе данные теряются).
      Все сессии делят одну транзакцию, поэтому годится только для тестов.
    - SQLite файл - обычный пул: у каждой сессии своё соединение и своя транзакция.
    - Остальные (PostgreSQL) - NullPool.
    """
    if is_sqlite_memory(url):
        engine = create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_pragmas(engine, wal=False)
    elif make_url(url).get_backend_name() == "sqlite":
        engine = create_async_engine(
            url,
            echo=echo,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
            pool_pre_ping=True,
        )
        enable_sqlite_pragmas(engine)
    else:
        engine = create_async_engine(url, echo=echo, poolclass=NullPool)
    return engine


engine = create_engine_for(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db():
    """Initialize database (create all tables)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db():
    """Drop all tables (use with caution!)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
