"""Task router for the Task Management API."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from sqlmodel import Session

from app.db.config import get_session
from app.middleware.auth import get_current_user, CurrentUser
from app.models.task import TaskPriority, TaskStatus
from app.repositories.task_repository import TaskRepository
from app.repositories.user_repository import UserRepository
from app.schemas.response import ApiResponse, success_response
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.task_service import DUE_SOON_DAYS, TaskService
from app.utils.time import parse_datetime

router = APIRouter(prefix="/task", tags=["Tasks"])  # main.py adds the /api prefix

NOT_FOUND_MESSAGE = "Task not found"


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    """Dependency for getting TaskService instance."""
    return TaskService(TaskRepository(session), UserRepository(session))


def _not_found() -> HTTPException:
    # Same message whether the task is missing or owned by someone else
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)


@router.get("", response_model=ApiResponse)
def list_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List all of the caller's tasks, newest first."""
    tasks = service.list_all(current_user.user_id)
    return success_response(tasks, "Tasks retrieved successfully")


@router.get("/filter", response_model=ApiResponse)
def filter_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
    status_filter: Optional[str] = Query(None, alias="status", description="Pending, InProgress, Completed, Cancelled"),
    priority: Optional[str] = Query(None, description="Low, Medium, High, Critical"),
    category: Optional[str] = Query(None, description="Exact category name"),
    due_date_from: Optional[str] = Query(None, alias="dueDateFrom", description="Inclusive lower bound (ISO 8601)"),
    due_date_to: Optional[str] = Query(None, alias="dueDateTo", description="Inclusive upper bound (ISO 8601)"),
):
    """Filter the caller's tasks. Unrecognized values are ignored rather than rejected."""
    tasks = service.filter(
        current_user.user_id,
        status=TaskStatus.parse(status_filter),
        priority=TaskPriority.parse(priority),
        category=category,
        due_from=parse_datetime(due_date_from),
        due_to=parse_datetime(due_date_to),
    )
    return success_response(tasks, "Tasks filtered successfully")


@router.get("/statistics", response_model=ApiResponse)
def task_statistics(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Counters and completion rate over all of the caller's tasks."""
    return success_response(service.statistics(current_user.user_id), "Statistics retrieved successfully")


@router.get("/overdue", response_model=ApiResponse)
def overdue_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return success_response(service.overdue(current_user.user_id), "Overdue tasks retrieved successfully")


@router.get("/due-soon", response_model=ApiResponse)
def tasks_due_soon(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
    days: int = Query(DUE_SOON_DAYS, description="Look-ahead window in days"),
):
    tasks = service.due_soon(current_user.user_id, days)
    return success_response(tasks, "Tasks due soon retrieved successfully")


@router.post("/create", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller."""
    task = service.create(
        current_user.user_id,
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
        priority=task_data.priority,
        due_date=task_data.due_date,
        category=task_data.category,
        tags=task_data.tags,
    )
    return success_response(task, "Task created successfully")


@router.get("/{task_id}", response_model=ApiResponse)
def get_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = service.get_by_id(task_id, current_user.user_id)
    if not task:
        raise _not_found()
    return success_response(task, "Task retrieved successfully")


@router.put("/{task_id}", response_model=ApiResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Partial update: only fields present in the body are changed."""
    task = service.update(task_id, current_user.user_id, task_data.model_dump(exclude_unset=True))
    if not task:
        raise _not_found()
    return success_response(task, "Task updated successfully")


@router.patch("/{task_id}/complete", response_model=ApiResponse)
def complete_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    if not service.mark_completed(task_id, current_user.user_id):
        raise _not_found()
    return success_response(service.get_by_id(task_id, current_user.user_id), "Task marked as completed")


@router.patch("/{task_id}/start", response_model=ApiResponse)
def start_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    if not service.mark_in_progress(task_id, current_user.user_id):
        raise _not_found()
    return success_response(service.get_by_id(task_id, current_user.user_id), "Task marked as in progress")


@router.delete("/{task_id}", response_model=ApiResponse)
def delete_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Hard delete a task."""
    if not service.delete(task_id, current_user.user_id):
        raise _not_found()
    return success_response(message="Task deleted successfully")
