"""SQLModel table models."""
from app.models.user import User
from app.models.task import Task, TaskPriority, TaskStatus

__all__ = ["User", "Task", "TaskPriority", "TaskStatus"]
