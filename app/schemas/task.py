"""Task schemas for the Task Management API."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional, Union

from app.models.task import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TaskPriority,
    TaskStatus,
)


class TaskCreate(BaseModel):
    """Schema for creating a task. Owner and id are never taken from the payload."""
    title: str  # stripped and length-checked by TaskService
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    status: Optional[TaskStatus] = None  # defaults to Pending
    priority: Optional[TaskPriority] = None  # defaults to Medium
    due_date: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=CATEGORY_MAX_LENGTH)
    tags: Optional[Union[str, List[str]]] = None  # "a,b" or ["a", "b"]


class TaskUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""
    title: Optional[str] = None
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=CATEGORY_MAX_LENGTH)
    tags: Optional[Union[str, List[str]]] = None


class TaskResponse(BaseModel):
    """Task as returned by the API, including derived display fields."""
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    status_display: str
    priority: TaskPriority
    priority_display: str
    priority_weight: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    category: Optional[str] = None
    tags: List[str] = []
    is_overdue: bool = False
    days_until_due: Optional[int] = None  # None when there is no due date or the task is completed


class TaskStatistics(BaseModel):
    """Aggregate counters over all of a user's tasks."""
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0
    due_soon: int = 0
    completion_rate: float = 0.0
