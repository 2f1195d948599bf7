"""Repository layer for data access."""

from .agent import AgentRepository
from .base import BaseRepository
from .project import ProjectRepository
from .tag import TagRepository
from .task import TaskRepository

__all__ = [
    "BaseRepository",
    "AgentRepository",
    "ProjectRepository",
    "TaskRepository",
    "TagRepository",
]
