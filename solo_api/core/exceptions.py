"""
Domain exceptions.

Сервисный слой поднимает только эти исключения. API слой (api/errors.py)
превращает их в HTTP ответы единого формата:

    NotFoundError    -> 404 NOT_FOUND
    ValidationError  -> 400 VALIDATION_ERROR
    ConflictError    -> 409 CONFLICT
    StorageError     -> 500 STORAGE_ERROR
"""


class SoloAPIError(Exception):
    """Base class for all domain errors."""

    code = "ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(SoloAPIError):
    """
    Ресурс не найден.

    Использование:
        raise NotFoundError("Task", task_id)
    """

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with id={resource_id} not found")


class ValidationError(SoloAPIError):
    """
    Ошибка валидации входных данных.

    Поднимается ДО открытия транзакции, поэтому ничего не откатывается.
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ConflictError(SoloAPIError):
    """
    Нарушение уникальности на уровне БД (гонка при создании тега).

    Временная ошибка: вызывающая сторона может повторить всю операцию.
    """

    code = "CONFLICT"


class StorageError(SoloAPIError):
    """Any other persistence failure. The unit of work has been rolled back."""

    code = "STORAGE_ERROR"
