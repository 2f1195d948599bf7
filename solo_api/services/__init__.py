"""Service layer (business logic)."""

from .agent import AgentService, check_agent_reference
from .project import ProjectService
from .reconciler import reconcile
from .tag import TagService
from .tag_registry import resolve_tag
from .task import TaskService, task_to_response
from .unit_of_work import unit_of_work

__all__ = [
    "AgentService",
    "ProjectService",
    "TaskService",
    "TagService",
    "check_agent_reference",
    "reconcile",
    "resolve_tag",
    "task_to_response",
    "unit_of_work",
]
