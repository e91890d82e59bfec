"""Task management API endpoints."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.deps import DbSession
from src.core.config import settings
from src.models.task import TaskPriority, TaskStatus
from src.storage.errors import ValidationError
from src.storage.schemas import TaskCreate, TaskUpdate
from src.storage.tasks import TaskStorage

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class TaskClient(BaseModel):
    id: int
    name: str
    industry: str
    initials: str


class TaskResponse(BaseModel):
    """Task response model."""

    id: int
    description: str
    due_date: datetime
    priority: str
    status: str
    notes: str | None
    assigned_to_id: int
    created_at: datetime
    updated_at: datetime | None
    completed_at: datetime | None
    completed_by_id: int | None
    client: TaskClient


class TaskListResponse(BaseModel):
    """Paginated task list response."""

    items: list[TaskResponse]
    total: int
    page: int
    page_size: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


async def _task_response(storage: TaskStorage, task_id: int) -> TaskResponse:
    """Reload the task with its client summary."""
    task = await storage.get_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse(**task)


def _enum_filter(enum_cls, field: str, value: str | None):
    """Parse an optional enum query filter; ``all`` means no filter."""
    if not value or value == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field: [f"Must be one of: all, {allowed}"]}) from exc


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    db: DbSession,
    audit: Audit,
    query: str | None = Query(default=None, min_length=1),
    priority: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    client_id: int | None = Query(default=None, gt=0, alias="clientId"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        alias="pageSize",
    ),
) -> TaskListResponse:
    """List tasks with optional filters and pagination.

    ``priority`` and ``status`` accept ``all`` to disable the filter.
    """
    priority_value = _enum_filter(TaskPriority, "priority", priority)
    status_value = _enum_filter(TaskStatus, "status", status_filter)

    result = await TaskStorage(db).list(
        page=page,
        page_size=page_size,
        query=query,
        priority=priority_value,
        status=status_value,
        client_id=client_id,
    )
    audit.record("viewed", "task", "Viewed task list with filters")
    return TaskListResponse(**result)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, db: DbSession, audit: Audit) -> TaskResponse:
    """Get task by ID."""
    response = await _task_response(TaskStorage(db), task_id)
    audit.record(
        "viewed",
        "task",
        f"Viewed task: {response.description}",
        resource_id=task_id,
        client_id=response.client.id,
    )
    return response


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, db: DbSession, audit: Audit) -> TaskResponse:
    """Create a task for an existing client and log it on the client's timeline."""
    storage = TaskStorage(db)
    task = await storage.create(payload, user_id=audit.user.id)
    audit.record(
        "created",
        "task",
        f"Created task: {task.description}",
        resource_id=task.id,
        client_id=task.client_id,
    )
    return await _task_response(storage, task.id)


@router.patch("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(task_id: int, db: DbSession, audit: Audit) -> TaskResponse:
    """Mark a task completed by the current user.

    Completing an already completed or cancelled task returns 409.
    """
    storage = TaskStorage(db)
    task = await storage.complete(task_id, user_id=audit.user.id)
    audit.record(
        "modified",
        "task",
        f"Completed task: {task.description}",
        resource_id=task_id,
        client_id=task.client_id,
    )
    return await _task_response(storage, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    db: DbSession,
    audit: Audit,
) -> TaskResponse:
    """Partially update a task; status changes follow the task lifecycle."""
    storage = TaskStorage(db)
    task = await storage.update(task_id, payload, user_id=audit.user.id)
    audit.record(
        "updated",
        "task",
        f"Updated task: {task.description}",
        resource_id=task_id,
        client_id=task.client_id,
    )
    return await _task_response(storage, task_id)


@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(task_id: int, db: DbSession, audit: Audit) -> DeleteResponse:
    """Delete a task."""
    task = await TaskStorage(db).delete(task_id)
    audit.record(
        "deleted",
        "task",
        f"Deleted task: {task.description}",
        resource_id=task_id,
        client_id=task.client_id,
    )
    return DeleteResponse(success=True, message="Task deleted successfully")
