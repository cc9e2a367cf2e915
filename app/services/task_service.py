"""Task access service: ownership rules, validation, filtering and statistics."""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from app.models.task import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TAGS_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskPriority,
    TaskStatus,
)
from app.repositories.base import TaskStore, UserStore
from app.schemas.task import TaskResponse, TaskStatistics
from app.services.errors import InvalidOwnerError, TaskValidationError
from app.services.task_mapping import join_tags, to_response
from app.utils.logger import get_logger
from app.utils.time import to_naive_utc, utcnow

logger = get_logger(__name__)

DUE_SOON_DAYS = 7
MAX_DUE_SOON_DAYS = 365


class TaskService:
    """
    Sole entry point for reading and mutating tasks.

    Every operation is scoped to the requesting user. A task owned by someone
    else is reported exactly like a missing one.
    """

    def __init__(
        self,
        task_store: TaskStore,
        user_store: UserStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.tasks = task_store
        self.users = user_store
        self.clock = clock

    # -- helpers ---------------------------------------------------------

    def _owned(self, task_id: int, user_id: str) -> Optional[Task]:
        task = self.tasks.get_by_id(task_id)
        if task is None or task.user_id != user_id:
            return None
        return task

    def _respond(self, tasks: Iterable[Task]) -> List[TaskResponse]:
        today = self.clock().date()
        return [to_response(task, today) for task in tasks]

    def _respond_one(self, task: Task) -> TaskResponse:
        return to_response(task, self.clock().date())

    @staticmethod
    def _validate_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise TaskValidationError("Title is required", field="title")
        title = title.strip()
        if len(title) > TITLE_MAX_LENGTH:
            raise TaskValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters", field="title"
            )
        return title

    @staticmethod
    def _optional_text(value: Optional[str], field: str, max_length: int) -> Optional[str]:
        """Empty strings clear the field."""
        if value is None or value == "":
            return None
        if len(value) > max_length:
            raise TaskValidationError(
                f"{field.capitalize()} must be at most {max_length} characters", field=field
            )
        return value

    @staticmethod
    def _tags(tags: Union[str, Iterable[str], None]) -> str:
        joined = join_tags(tags)
        if len(joined) > TAGS_MAX_LENGTH:
            raise TaskValidationError(
                f"Tags must be at most {TAGS_MAX_LENGTH} characters", field="tags"
            )
        return joined

    @staticmethod
    def _enum(enum_cls, value, field: str):
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            raise TaskValidationError(f"Invalid {field}: {value}", field=field)

    @staticmethod
    def _due_date(value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None

    # -- reads -----------------------------------------------------------

    def get_by_id(self, task_id: int, user_id: str) -> Optional[TaskResponse]:
        """Fetch a task by id; None when it is missing or owned by another user."""
        task = self._owned(task_id, user_id)
        return self._respond_one(task) if task else None

    def list_all(self, user_id: str) -> List[TaskResponse]:
        return self._respond(self.tasks.list_by_user(user_id))

    def filter(
        self,
        user_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
    ) -> List[TaskResponse]:
        """AND-combine the supplied criteria over the user's tasks."""
        tasks = self.tasks.filter(
            user_id,
            status=status,
            priority=priority,
            category=category or None,
            due_from=self._due_date(due_from),
            due_to=self._due_date(due_to),
        )
        return self._respond(tasks)

    def by_status(self, user_id: str, status: TaskStatus) -> List[TaskResponse]:
        return self.filter(user_id, status=status)

    def by_priority(self, user_id: str, priority: TaskPriority) -> List[TaskResponse]:
        return self.filter(user_id, priority=priority)

    def by_category(self, user_id: str, category: str) -> List[TaskResponse]:
        return self.filter(user_id, category=category)

    def overdue(self, user_id: str) -> List[TaskResponse]:
        """Open tasks whose due timestamp has already passed, earliest first."""
        tasks = self.tasks.list_open_due_between(user_id, end=self.clock(), include_end=False)
        return self._respond(tasks)

    def due_soon(self, user_id: str, days: int = DUE_SOON_DAYS) -> List[TaskResponse]:
        """Open tasks due between now and now + days, earliest first."""
        if days < 1 or days > MAX_DUE_SOON_DAYS:
            raise TaskValidationError(
                f"Days must be between 1 and {MAX_DUE_SOON_DAYS}", field="days"
            )
        now = self.clock()
        tasks = self.tasks.list_open_due_between(user_id, start=now, end=now + timedelta(days=days))
        return self._respond(tasks)

    def statistics(self, user_id: str) -> TaskStatistics:
        """Single pass over the user's tasks. Overdue compares full timestamps."""
        now = self.clock()
        soon = now + timedelta(days=DUE_SOON_DAYS)
        stats = TaskStatistics()

        for task in self.tasks.list_by_user(user_id):
            stats.total += 1
            if task.status == TaskStatus.COMPLETED:
                stats.completed += 1
                continue
            if task.status == TaskStatus.PENDING:
                stats.pending += 1
            elif task.status == TaskStatus.IN_PROGRESS:
                stats.in_progress += 1
            if task.due_date is not None:
                if task.due_date < now:
                    stats.overdue += 1
                elif task.due_date <= soon:
                    stats.due_soon += 1

        if stats.total:
            stats.completion_rate = round(stats.completed / stats.total * 100, 2)
        return stats

    # -- writes ----------------------------------------------------------

    def create(
        self,
        user_id: str,
        title: str,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        due_date: Optional[datetime] = None,
        category: Optional[str] = None,
        tags: Union[str, Iterable[str], None] = None,
    ) -> TaskResponse:
        """
        Create a task owned by user_id.

        Raises:
            TaskValidationError: blank or over-length title, or another field out of bounds
            InvalidOwnerError: user_id does not reference an existing user
        """
        task = Task(
            user_id=user_id,
            title=self._validate_title(title),
            description=self._optional_text(description, "description", DESCRIPTION_MAX_LENGTH),
            status=self._enum(TaskStatus, status, "status") if status is not None else TaskStatus.PENDING,
            priority=(
                self._enum(TaskPriority, priority, "priority") if priority is not None else TaskPriority.MEDIUM
            ),
            due_date=self._due_date(due_date),
            category=self._optional_text(category, "category", CATEGORY_MAX_LENGTH),
            tags=self._tags(tags),
            created_at=self.clock(),
            updated_at=None,
        )

        if not self.users.exists(user_id):
            logger.warning("Task creation rejected for unknown user", user_id=user_id)
            raise InvalidOwnerError(user_id)

        task = self.tasks.create(task)
        logger.info("Task created", task_id=task.id, user_id=user_id)
        return self._respond_one(task)

    def update(self, task_id: int, user_id: str, changes: Dict[str, Any]) -> Optional[TaskResponse]:
        """
        Apply a partial update. Keys absent from changes leave the field untouched.

        Returns None when the task is missing or not owned by user_id.
        """
        task = self._owned(task_id, user_id)
        if task is None:
            return None

        # Validate everything before touching the task
        values: Dict[str, Any] = {}
        if "title" in changes:
            values["title"] = self._validate_title(changes["title"])
        if "description" in changes:
            values["description"] = self._optional_text(
                changes["description"], "description", DESCRIPTION_MAX_LENGTH
            )
        if changes.get("status") is not None:
            values["status"] = self._enum(TaskStatus, changes["status"], "status")
        if changes.get("priority") is not None:
            values["priority"] = self._enum(TaskPriority, changes["priority"], "priority")
        if "due_date" in changes:
            values["due_date"] = self._due_date(changes["due_date"])
        if "category" in changes:
            values["category"] = self._optional_text(changes["category"], "category", CATEGORY_MAX_LENGTH)
        if "tags" in changes:
            values["tags"] = self._tags(changes["tags"])

        for field, value in values.items():
            setattr(task, field, value)
        task.updated_at = self.clock()
        task = self.tasks.update(task)
        logger.info(
            "Task updated",
            task_id=task_id,
            user_id=user_id,
            fields=sorted(values),
        )
        return self._respond_one(task)

    def _set_status(self, task_id: int, user_id: str, status: TaskStatus) -> bool:
        task = self._owned(task_id, user_id)
        if task is None:
            return False
        task.status = status
        task.updated_at = self.clock()
        self.tasks.update(task)
        logger.info("Task status changed", task_id=task_id, user_id=user_id, status=status.value)
        return True

    def mark_completed(self, task_id: int, user_id: str) -> bool:
        return self._set_status(task_id, user_id, TaskStatus.COMPLETED)

    def mark_in_progress(self, task_id: int, user_id: str) -> bool:
        return self._set_status(task_id, user_id, TaskStatus.IN_PROGRESS)

    def delete(self, task_id: int, user_id: str) -> bool:
        """Hard delete. False when the task is missing or owned by another user."""
        if self._owned(task_id, user_id) is None:
            return False
        deleted = self.tasks.delete(task_id)
        if deleted:
            logger.info("Task deleted", task_id=task_id, user_id=user_id)
        return deleted
