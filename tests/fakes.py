# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from app.models.task import Task, TaskPriority, TaskStatus
from app.models.user import User
from app.repositories.base import TaskStore, UserStore


class FakeClock:
    """
    Controllable clock for deterministic date rules.

    Call it to read "now"; advance() moves time forward.
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryTaskStore(TaskStore):
    """Dict-backed TaskStore honouring the same ordering and predicate rules as SQL."""

    def __init__(self) -> None:
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1

    def _newest_first(self, tasks: List[Task]) -> List[Task]:
        return sorted(tasks, key=lambda t: (t.created_at, t.id), reverse=True)

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def list_by_user(self, user_id: str) -> List[Task]:
        return self._newest_first([t for t in self._tasks.values() if t.user_id == user_id])

    def filter(
        self,
        user_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
    ) -> List[Task]:
        out = []
        for t in self.list_by_user(user_id):
            if status is not None and t.status != status:
                continue
            if priority is not None and t.priority != priority:
                continue
            if category and t.category != category:
                continue
            if due_from is not None and (t.due_date is None or t.due_date < due_from):
                continue
            if due_to is not None and (t.due_date is None or t.due_date > due_to):
                continue
            out.append(t)
        return out

    def list_open_due_between(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_end: bool = True,
    ) -> List[Task]:
        out = []
        for t in self._tasks.values():
            if t.user_id != user_id or t.due_date is None or t.status == TaskStatus.COMPLETED:
                continue
            if start is not None and t.due_date < start:
                continue
            if end is not None and (t.due_date > end if include_end else t.due_date >= end):
                continue
            out.append(t)
        return sorted(out, key=lambda t: (t.due_date, t.id))

    def create(self, task: Task) -> Task:
        task.id = self._next_id
        self._next_id += 1
        self._tasks[task.id] = task
        return task

    def update(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    def delete(self, task_id: int) -> bool:
        return self._tasks.pop(task_id, None) is not None


class InMemoryUserStore(UserStore):
    def __init__(self, users: Optional[List[User]] = None) -> None:
        self._users: Dict[str, User] = {u.id: u for u in users or []}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def exists(self, user_id: str) -> bool:
        return user_id in self._users

    def create(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def update_last_login(self, user_id: str, when: datetime) -> bool:
        user = self._users.get(user_id)
        if user is None:
            return False
        user.last_login_at = when
        return True


class FailingTaskStore(InMemoryTaskStore):
    """TaskStore whose every read blows up, standing in for a lost database."""

    def list_by_user(self, user_id: str) -> List[Task]:
        raise RuntimeError("connection refused: db.internal:5432")
