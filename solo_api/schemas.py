"""
Pydantic схемы (DTO) для API и сервисного слоя.

TaskResponse - внешнее представление задачи: его собирает TaskService,
поэтому схемы лежат вне пакета api.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import TAG_NAME_MAX_LENGTH

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Имя тега в запросе: длина ограничена колонкой tags.name
TagName = Annotated[str, Field(max_length=TAG_NAME_MAX_LENGTH)]

# ============================================================================
# AGENT SCHEMAS
# ============================================================================


class AgentCreate(BaseModel):
    """
    Схема для создания агента (POST /agents).

    Пример запроса:
    {
        "name": "claude",
        "type": "ai",
        "description": "Code review"
    }
    """

    name: str = Field(..., min_length=1, max_length=100, description="Уникальное имя")
    type: str = Field(..., min_length=1, max_length=50, description="Тип агента")
    description: str = Field("", description="Описание")


class AgentUpdate(BaseModel):
    """Частичное обновление агента: пустые и отсутствующие поля не меняются."""

    name: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=50)
    description: str | None = None


class AgentResponse(BaseModel):
    id: str
    name: str
    type: str
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AgentListResponse(BaseModel):
    agents: list[AgentResponse]
    total: int


# ============================================================================
# PROJECT SCHEMAS
# ============================================================================


class ProjectCreate(BaseModel):
    """
    Схема для создания проекта (POST /projects).

    Пример запроса:
    {
        "name": "solo",
        "directory": "/home/alice/src/solo",
        "agent_id": "3f1c..."
    }
    """

    name: str = Field(..., min_length=1, max_length=200, description="Название проекта")
    description: str = Field("", description="Описание проекта")
    directory: str = Field(..., min_length=1, max_length=500, description="Рабочая директория")
    agent_id: str | None = Field(None, max_length=36, description="ID назначенного агента")


class ProjectUpdate(BaseModel):
    """
    Схема для обновления проекта (PUT /projects/{id}).

    Частичное обновление: пустые и отсутствующие поля не меняются,
    agent_id: null - агент не меняется.
    """

    name: str | None = Field(None, max_length=200)
    description: str | None = None
    directory: str | None = Field(None, max_length=500)
    agent_id: str | None = Field(None, max_length=36)


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str
    directory: str
    agent_id: str | None = None
    agent: AgentResponse | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskCreate(BaseModel):
    """
    Схема для создания задачи (POST /tasks).

    Пример запроса:
    {
        "title": "Настроить CI",
        "status": "in_progress",
        "project_id": "5b0e...",
        "tags": ["backend", "urgent"]
    }

    tags: null равносильно [] - задача создаётся без тегов.
    """

    title: str = Field(..., min_length=1, max_length=300, description="Название задачи")
    description: str = Field("", description="Описание задачи")
    status: str = Field("", max_length=50, description="Статус (по умолчанию todo)")
    assignee: str = Field("", max_length=200, description="Исполнитель")
    project_id: str = Field("", max_length=36, description="ID проекта (не проверяется)")
    agent_id: str | None = Field(None, max_length=36, description="ID назначенного агента")
    tags: list[TagName] = Field(default_factory=list, description="Названия тегов, в нужном порядке")

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, value):
        return [] if value is None else value


class TaskUpdate(BaseModel):
    """
    Схема для обновления задачи (PUT /tasks/{id}).

    Частичное обновление: отсутствующие или пустые поля не меняются.

    tags - три состояния:
    - поле не передано (или null) -> теги не трогаются
    - []                          -> все теги задачи удаляются
    - ["a", "b"]                  -> теги заменяются целиком
    """

    title: str | None = Field(None, max_length=300)
    description: str | None = None
    status: str | None = Field(None, max_length=50)
    assignee: str | None = Field(None, max_length=200)
    project_id: str | None = Field(None, max_length=36)
    agent_id: str | None = Field(None, max_length=36)
    tags: list[TagName] | None = None


class TaskResponse(BaseModel):
    """Assembled task view returned by TaskService."""

    id: str
    title: str
    description: str
    status: str
    assignee: str
    project_id: str
    agent_id: str | None = None
    agent: AgentResponse | None = None
    tags: list[str] = Field(default_factory=list, description="Имена тегов в порядке добавления")
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]
    total: int


# ============================================================================
# TAG SCHEMAS
# ============================================================================


class TagResponse(BaseModel):
    """Тег без статистики (GET /tags/unused, PATCH /tags/{id})."""

    id: str
    name: str
    color: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TagWithUsage(TagResponse):
    usage_count: int = Field(..., description="Количество задач с этим тегом")


class TagUpdate(BaseModel):
    """Изменение цвета тега. null - убрать цвет."""

    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN, description="Цвет #RRGGBB")


# ============================================================================
# ERROR SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    code: str = Field(..., description="Код ошибки (VALIDATION_ERROR, NOT_FOUND, CONFLICT, ...)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """
    Единый формат ошибок API.

    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Task with id=... not found",
            "details": null
        }
    }
    """

    error: ErrorBody
