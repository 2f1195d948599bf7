"""
Обработчики ошибок (Exception Handlers) для API.

Сервисы поднимают доменные исключения (core/exceptions.py),
здесь они превращаются в HTTP ответы единого формата ErrorResponse.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    ConflictError,
    NotFoundError,
    SoloAPIError,
    StorageError,
    ValidationError,
)
from ..core.logging import get_logger
from ..schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)

STATUS_BY_ERROR: dict[type[SoloAPIError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(
    status_code: int, code: str, message: str, details: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_error_handler(request: Request, exc: SoloAPIError) -> JSONResponse:
    """
    Обработчик для доменных ошибок.

    StorageError - внутренняя ошибка: детали пишем в лог, клиенту не показываем.
    """
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, StorageError):
        logger.error(f"Storage Error: {exc.message}", exc_info=exc.__cause__)
        return _error_response(status_code, exc.code, "Internal storage error")

    logger.warning(f"API Error: {exc.code} - {exc.message}")

    details = None
    if isinstance(exc, ValidationError) and exc.field:
        details = [ErrorDetail(field=exc.field, message=exc.message)]

    return _error_response(status_code, exc.code, exc.message, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Обработчик для ошибок валидации Pydantic (422).

    {"detail": [{"loc": ["body", "title"], "msg": "..."}]}
    превращается в
    {"error": {"code": "VALIDATION_ERROR", "details": [{"field": "title", ...}]}}
    """
    logger.warning(f"Validation Error: {exc.errors()}")

    details = []
    for error in exc.errors():
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        # Если поле в body, убираем "body" из пути
        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(ErrorDetail(field=str(field_name), message=error.get("msg", "Invalid value")))

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Регистрирует все error handlers в приложении (вызывается из main.py)."""
    app.add_exception_handler(SoloAPIError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
