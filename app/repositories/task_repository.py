"""SQLModel implementation of the task store."""
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select

from app.models.task import Task, TaskPriority, TaskStatus
from app.repositories.base import TaskStore


class TaskRepository(TaskStore):
    """Task persistence backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def _newest_first(self, statement):
        return statement.order_by(Task.created_at.desc(), Task.id.desc())

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self.session.get(Task, task_id)

    def list_by_user(self, user_id: str) -> List[Task]:
        statement = self._newest_first(select(Task).where(Task.user_id == user_id))
        return list(self.session.exec(statement).all())

    def filter(
        self,
        user_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
    ) -> List[Task]:
        statement = select(Task).where(Task.user_id == user_id)

        if status is not None:
            statement = statement.where(Task.status == status)
        if priority is not None:
            statement = statement.where(Task.priority == priority)
        if category:
            statement = statement.where(Task.category == category)
        if due_from is not None:
            statement = statement.where(Task.due_date >= due_from)
        if due_to is not None:
            statement = statement.where(Task.due_date <= due_to)

        return list(self.session.exec(self._newest_first(statement)).all())

    def list_open_due_between(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_end: bool = True,
    ) -> List[Task]:
        statement = (
            select(Task)
            .where(Task.user_id == user_id)
            .where(Task.due_date.is_not(None))
            .where(Task.status != TaskStatus.COMPLETED)
        )
        if start is not None:
            statement = statement.where(Task.due_date >= start)
        if end is not None:
            statement = statement.where(Task.due_date <= end if include_end else Task.due_date < end)

        statement = statement.order_by(Task.due_date.asc(), Task.id.asc())
        return list(self.session.exec(statement).all())

    def create(self, task: Task) -> Task:
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def update(self, task: Task) -> Task:
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def delete(self, task_id: int) -> bool:
        task = self.session.get(Task, task_id)
        if task is None:
            return False
        self.session.delete(task)
        self.session.commit()
        return True
