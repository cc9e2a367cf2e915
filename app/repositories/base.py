"""
Store contracts for tasks and users.

The task access service depends only on these interfaces, so tests can swap
in in-memory implementations.
"""

import abc
from datetime import datetime
from typing import List, Optional

from app.models.task import Task, TaskPriority, TaskStatus
from app.models.user import User


class TaskStore(abc.ABC):
    """Persistence boundary for Task records."""

    @abc.abstractmethod
    def get_by_id(self, task_id: int) -> Optional[Task]:
        pass

    @abc.abstractmethod
    def list_by_user(self, user_id: str) -> List[Task]:
        """All tasks owned by user_id, newest-created first."""
        pass

    @abc.abstractmethod
    def filter(
        self,
        user_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
    ) -> List[Task]:
        """
        Conjunction of the supplied criteria, scoped to user_id.

        Absent criteria impose no constraint. Category matches exactly and the
        due date range is inclusive. Ordered newest-created first.
        """
        pass

    @abc.abstractmethod
    def list_open_due_between(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_end: bool = True,
    ) -> List[Task]:
        """Non-completed dated tasks with start <= due_date <= end, ordered by due date."""
        pass

    @abc.abstractmethod
    def create(self, task: Task) -> Task:
        """Persist a new task and return it with its assigned id."""
        pass

    @abc.abstractmethod
    def update(self, task: Task) -> Task:
        pass

    @abc.abstractmethod
    def delete(self, task_id: int) -> bool:
        """Hard delete. True only when a row was removed."""
        pass


class UserStore(abc.ABC):
    """Persistence boundary for User records."""

    @abc.abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abc.abstractmethod
    def exists(self, user_id: str) -> bool:
        pass

    @abc.abstractmethod
    def create(self, user: User) -> User:
        pass

    @abc.abstractmethod
    def update_last_login(self, user_id: str, when: datetime) -> bool:
        pass
