"""API layer - FastAPI endpoints."""

from .agents import router as agents_router
from .projects import router as projects_router
from .tags import router as tags_router
from .tasks import router as tasks_router

__all__ = [
    "agents_router",
    "projects_router",
    "tasks_router",
    "tags_router",
]
