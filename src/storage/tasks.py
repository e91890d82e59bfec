"""Task data access.

Status changes, including completion, are delegated to the task state
machine so ``completed_at``/``completed_by_id`` stay paired with
``status == completed``.
"""

from __future__ import annotations

import html
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.base import to_naive_utc
from src.models.client import ActivityType, Client
from src.models.task import Task, TaskPriority, TaskStatus
from src.orchestration.state_machine import TransitionNotAllowed, create_state_machine
from src.storage.activities import ActivityStorage
from src.storage.base import count_rows, initials, page_offset, validate
from src.storage.errors import NotFoundError, TaskTransitionError
from src.storage.schemas import TaskCreate, TaskUpdate

logger = get_logger(__name__)


def task_to_dict(task: Task, client: Client) -> dict[str, Any]:
    """Task columns plus an embedded client summary."""
    return {
        "id": task.id,
        "description": task.description,
        "due_date": task.due_date,
        "priority": task.priority.value,
        "status": task.status.value,
        "notes": task.notes,
        "assigned_to_id": task.assigned_to_id,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
        "completed_at": task.completed_at,
        "completed_by_id": task.completed_by_id,
        "client": {
            "id": client.id,
            "name": client.name,
            "industry": client.industry,
            "initials": initials(client.name),
        },
    }


class TaskStorage:
    """CRUD, listing and completion for follow-up tasks."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activities = ActivityStorage(session)

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        query: str | None = None,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
        client_id: int | None = None,
    ) -> dict[str, Any]:
        """List tasks by due date, soonest first, joined with their client."""
        stmt = (
            select(Task, Client)
            .join(Client, Task.client_id == Client.id)
            .order_by(Task.due_date.asc(), Task.id.asc())
        )
        if query:
            pattern = f"%{query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Task.description).like(pattern),
                    func.lower(Client.name).like(pattern),
                )
            )
        if priority is not None:
            stmt = stmt.where(Task.priority == priority)
        if status is not None:
            stmt = stmt.where(Task.status == status)
        if client_id is not None:
            stmt = stmt.where(Task.client_id == client_id)

        total = await count_rows(self.session, stmt)
        result = await self.session.execute(
            stmt.limit(page_size).offset(page_offset(page, page_size))
        )
        items = [task_to_dict(task, client) for task, client in result.all()]
        return {"items": items, "total": total, "page": page, "page_size": page_size}

    async def get_by_id(self, task_id: int) -> dict[str, Any] | None:
        result = await self.session.execute(
            select(Task, Client)
            .join(Client, Task.client_id == Client.id)
            .where(Task.id == task_id)
        )
        row = result.first()
        if row is None:
            return None
        return task_to_dict(row[0], row[1])

    async def get(self, task_id: int) -> Task:
        """Load the task row or raise NotFoundError."""
        task = await self.session.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def create(self, data: TaskCreate | dict[str, Any], user_id: int) -> Task:
        """Create a task owned by ``user_id`` unless another assignee is given.

        Also appends a ``meeting-scheduled`` activity to the client's timeline
        in the same session.
        """
        payload = validate(TaskCreate, data)
        client = await self.session.get(Client, payload.client_id)
        if client is None:
            raise NotFoundError("Client", payload.client_id)

        task = Task(
            client_id=payload.client_id,
            assigned_to_id=payload.assigned_to_id or user_id,
            description=payload.description.strip(),
            due_date=to_naive_utc(payload.due_date),
            priority=payload.priority,
            status=TaskStatus.PENDING,
            notes=payload.notes,
        )
        self.session.add(task)
        await self.session.flush()

        if payload.status != TaskStatus.PENDING:
            self._transition(task, payload.status, user_id)

        await self.activities.add_activity(
            client_id=task.client_id,
            user_id=user_id,
            type=ActivityType.MEETING_SCHEDULED,
            message=(
                '<span class="font-medium">You</span> scheduled a task: '
                f"{html.escape(task.description)}"
            ),
        )
        await self.session.flush()
        logger.info("task_created", task_id=task.id, client_id=task.client_id)
        return task

    async def update(
        self,
        task_id: int,
        data: TaskUpdate | dict[str, Any],
        user_id: int,
    ) -> Task:
        """Apply a partial update.

        Raises:
            NotFoundError: If the task does not exist.
            TaskTransitionError: If the requested status is unreachable.
        """
        payload = validate(TaskUpdate, data)
        task = await self.get(task_id)
        updates = payload.model_dump(exclude_unset=True)

        new_status = updates.pop("status", None)
        for field, value in updates.items():
            if value is None and field != "notes":
                continue
            if field == "due_date":
                value = to_naive_utc(value)
            setattr(task, field, value)

        if new_status is not None:
            self._transition(task, new_status, user_id)

        await self.session.flush()
        return task

    async def complete(self, task_id: int, user_id: int) -> Task:
        """Mark the task completed by ``user_id`` and log an approval activity.

        Completing a task that is already completed or cancelled raises
        TaskTransitionError rather than re-stamping it.
        """
        task = await self.get(task_id)
        if task.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED):
            raise TaskTransitionError(
                task.id, task.status.value, TaskStatus.COMPLETED.value
            )
        self._transition(task, TaskStatus.COMPLETED, user_id)

        await self.activities.add_activity(
            client_id=task.client_id,
            user_id=user_id,
            type=ActivityType.APPROVAL,
            message=(
                '<span class="font-medium">Task completed</span>: '
                f"{html.escape(task.description)}"
            ),
        )
        await self.session.flush()
        return task

    async def delete(self, task_id: int) -> Task:
        task = await self.get(task_id)
        await self.session.delete(task)
        await self.session.flush()
        logger.info("task_deleted", task_id=task_id)
        return task

    def _transition(self, task: Task, target: TaskStatus, user_id: int) -> None:
        current = task.status
        sm = create_state_machine(task=task)
        try:
            sm.transition_to(target, user_id=user_id)
        except TransitionNotAllowed as exc:
            raise TaskTransitionError(task.id, current.value, target.value) from exc
