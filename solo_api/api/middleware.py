"""HTTP middleware for request logging and tracing."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logging import generate_request_id, get_logger, request_id_var

logger = get_logger("api.requests")

# Не логируем служебные пути
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Логирует каждый HTTP запрос: метод, путь, статус, длительность.

    Выдаёт запросу request_id (он же попадает во все логи запроса
    и в заголовок ответа X-Request-ID).
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "Request failed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": int((time.perf_counter() - start_time) * 1000),
                        "client_ip": client_ip,
                        "error": str(e),
                    },
                    exc_info=True,
                )
                raise

            response.headers["X-Request-ID"] = request_id

            if request.url.path not in QUIET_PATHS:
                level = "info" if response.status_code < 400 else "warning"
                getattr(logger, level)(
                    "Request completed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status": response.status_code,
                        "duration_ms": int((time.perf_counter() - start_time) * 1000),
                        "client_ip": client_ip,
                    },
                )

            return response
        finally:
            request_id_var.reset(token)
