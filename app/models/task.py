"""Task model for SQLModel."""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from app.utils.time import utcnow

if TYPE_CHECKING:
    from app.models.user import User

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100
TAGS_MAX_LENGTH = 500


def _symbol_key(value: str) -> str:
    return value.replace("_", "").replace("-", "").replace(" ", "").lower()


class _SymbolicEnum(str, Enum):
    """String enum that also accepts its symbolic names case-insensitively."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = _symbol_key(value)
            for member in cls:
                if _symbol_key(member.value) == key:
                    return member
        return None

    @classmethod
    def parse(cls, value: Optional[str]):
        """Lenient parse: unknown or empty input yields None instead of an error."""
        if value is None or not str(value).strip():
            return None
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


class TaskStatus(_SymbolicEnum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def display(self) -> str:
        return _STATUS_DISPLAY[self]


class TaskPriority(_SymbolicEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def display(self) -> str:
        return self.value

    @property
    def weight(self) -> int:
        """Urgency weight, 1 (Low) to 4 (Critical)."""
        return _PRIORITY_WEIGHT[self]


_STATUS_DISPLAY = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.CANCELLED: "Cancelled",
}

_PRIORITY_WEIGHT = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
    TaskPriority.CRITICAL: 4,
}


class Task(SQLModel, table=True):
    """Task entity owned by exactly one user."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True, max_length=100)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))  # null until the first mutation
    due_date: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=False))
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    tags: str = Field(default="", max_length=TAGS_MAX_LENGTH)  # comma-joined, normalized

    # Relationships
    user: Optional["User"] = Relationship(back_populates="tasks")
