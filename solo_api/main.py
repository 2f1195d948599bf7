"""
Solo API: FastAPI приложение.

    uvicorn solo_api.main:app --reload

Swagger UI: /docs, ReDoc: /redoc.
Ресурсы живут под /api/v1/... и требуют заголовок X-API-Key.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .api import agents_router, projects_router, tags_router, tasks_router
from .api.dependencies import verify_api_key
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import settings
from .core.database import AsyncSessionLocal, init_db
from .core.logging import get_logger, setup_logging

setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

logger = get_logger(__name__)

APP_VERSION = "1.0.0"
API_PREFIX = "/api/v1"

# Момент старта (time.monotonic), выставляется в lifespan
_started_at: float | None = None


def uptime_seconds() -> int:
    if _started_at is None:
        return 0
    return int(time.monotonic() - _started_at)


# ============================================================================
# RATE LIMITING
# ============================================================================

limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 в том же конверте, что и остальные ошибки API."""
    logger.warning("Rate limit exceeded", extra={"path": request.url.path, "limit": str(exc.detail)})
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests, limit is {exc.detail}",
                "details": None,
            }
        },
    )


# ============================================================================
# LIFESPAN
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Создаёт недостающие таблицы при старте и пишет uptime при остановке."""
    global _started_at

    _started_at = time.monotonic()
    await init_db()
    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "database": "sqlite" if settings.is_sqlite else "server",
            "debug": settings.DEBUG,
        },
    )

    yield

    logger.info("Application stopped", extra={"uptime_seconds": uptime_seconds()})


# ============================================================================
# APPLICATION
# ============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    description=(
        "Task tracking backend. Tasks carry free-form tags; tags are created "
        "on first use and shared between tasks. A task's tag set is always "
        "replaced as a whole, in one transaction."
    ),
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

api_v1_router = APIRouter(prefix=API_PREFIX, dependencies=[Depends(verify_api_key)])
api_v1_router.include_router(agents_router)
api_v1_router.include_router(projects_router)
api_v1_router.include_router(tasks_router)
api_v1_router.include_router(tags_router)
app.include_router(api_v1_router)


# ============================================================================
# SERVICE ENDPOINTS (без API ключа)
# ============================================================================


@app.get("/", tags=["root"], summary="Информация о сервисе")
@limiter.limit(settings.RATE_LIMIT)
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "api_version": "v1",
        "docs": app.docs_url,
        "endpoints": {
            "agents": f"{API_PREFIX}/agents",
            "projects": f"{API_PREFIX}/projects",
            "tasks": f"{API_PREFIX}/tasks",
            "tags": f"{API_PREFIX}/tags",
        },
        "rate_limit": settings.RATE_LIMIT,
    }


@app.get("/health", tags=["health"], summary="Проверка состояния")
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request):
    """
    200 если БД отвечает на SELECT 1, иначе 503.

    Пример ответа:
    ```json
    {"status": "ok", "checks": {"database": "connected", ...}, "timestamp": "..."}
    ```
    """
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.warning("Health check: database unavailable", exc_info=True)
        database = "disconnected"

    healthy = database == "connected"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "error",
            "checks": {
                "database": database,
                "version": APP_VERSION,
                "uptime_seconds": uptime_seconds(),
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
