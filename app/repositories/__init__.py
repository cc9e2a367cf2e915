"""Task and user stores."""

from .base import TaskStore, UserStore
from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = ["TaskStore", "UserStore", "TaskRepository", "UserRepository"]
