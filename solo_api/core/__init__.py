"""Core application components."""

from .config import Settings, settings
from .database import AsyncSessionLocal, create_engine_for, drop_db, engine, init_db
from .exceptions import ConflictError, NotFoundError, SoloAPIError, StorageError, ValidationError

__all__ = [
    "settings",
    "Settings",
    "engine",
    "create_engine_for",
    "AsyncSessionLocal",
    "init_db",
    "drop_db",
    "SoloAPIError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "StorageError",
]
