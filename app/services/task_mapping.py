"""Conversions between stored tasks and API responses."""
from datetime import date
from typing import Iterable, List, Optional, Union

from app.models.task import Task, TaskPriority, TaskStatus
from app.schemas.task import TaskResponse


def split_tags(tags: Optional[str]) -> List[str]:
    """Split a comma-joined tag string, trimming entries and dropping empty ones."""
    if not tags or not tags.strip():
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def join_tags(tags: Union[str, Iterable[str], None]) -> str:
    """
    Normalize tags to their stored form.

    Accepts either a comma-joined string or a sequence of labels. The result is
    idempotent: join_tags(join_tags(x)) == join_tags(x).
    """
    if tags is None:
        return ""
    if isinstance(tags, str):
        return ",".join(split_tags(tags))
    return ",".join(label for tag in tags for label in split_tags(tag))


def is_overdue(task: Task, today: date) -> bool:
    """Date-only rule: the due date's calendar day is before today and the task is open."""
    if task.due_date is None or task.status == TaskStatus.COMPLETED:
        return False
    return task.due_date.date() < today


def days_until_due(task: Task, today: date) -> Optional[int]:
    """Calendar days from today to the due date; None when undated or completed."""
    if task.due_date is None or task.status == TaskStatus.COMPLETED:
        return None
    return (task.due_date.date() - today).days


def to_response(task: Task, today: date) -> TaskResponse:
    status = TaskStatus(task.status)
    priority = TaskPriority(task.priority)
    return TaskResponse(
        id=task.id,
        user_id=task.user_id,
        title=task.title,
        description=task.description,
        status=status,
        status_display=status.display,
        priority=priority,
        priority_display=priority.display,
        priority_weight=priority.weight,
        created_at=task.created_at,
        updated_at=task.updated_at,
        due_date=task.due_date,
        category=task.category,
        tags=split_tags(task.tags),
        is_overdue=is_overdue(task, today),
        days_until_due=days_until_due(task, today),
    )
