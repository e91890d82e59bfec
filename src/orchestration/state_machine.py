"""Task lifecycle state machine.

The only code path that writes ``Task.status``, ``Task.completed_at`` and
``Task.completed_by_id``, which keeps the completion pair consistent with
``status == completed``.
"""

from typing import TYPE_CHECKING

import structlog
from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from src.models.base import utcnow
from src.models.task import TaskStatus

if TYPE_CHECKING:
    from src.models.task import Task

logger = structlog.get_logger()


class TaskStateMachine(StateMachine):
    """State machine for follow-up task lifecycle.

    States match TaskStatus enum from models:
    - pending: Task created, nothing done yet
    - in_progress: Someone is working on it
    - scheduled: Waiting on a booked meeting or date
    - completed: Done (final)
    - cancelled: Dropped (final)

    Transitions:
    - start: pending/scheduled -> in_progress
    - schedule: pending/in_progress -> scheduled
    - reopen: in_progress/scheduled -> pending
    - complete: pending/in_progress/scheduled -> completed
    - cancel: pending/in_progress/scheduled -> cancelled
    """

    # States (match TaskStatus enum values)
    pending = State(initial=True, value=TaskStatus.PENDING)
    in_progress = State(value=TaskStatus.IN_PROGRESS)
    scheduled = State(value=TaskStatus.SCHEDULED)
    completed = State(final=True, value=TaskStatus.COMPLETED)
    cancelled = State(final=True, value=TaskStatus.CANCELLED)

    # Transitions
    start = pending.to(in_progress) | scheduled.to(in_progress)
    schedule = pending.to(scheduled) | in_progress.to(scheduled)
    reopen = in_progress.to(pending) | scheduled.to(pending)
    complete = (
        pending.to(completed) | in_progress.to(completed) | scheduled.to(completed)
    )
    cancel = pending.to(cancelled) | in_progress.to(cancelled) | scheduled.to(cancelled)

    def __init__(self, task: "Task") -> None:
        """Initialize state machine for a task.

        Args:
            task: Task model instance to manage. The machine starts from the
                task's current status.
        """
        self.task = task
        super().__init__(start_value=task.status or TaskStatus.PENDING)

    @property
    def status(self) -> TaskStatus:
        """Get current state as TaskStatus enum."""
        return self.current_state.value

    def transition_to(self, target: TaskStatus, user_id: int | None = None) -> None:
        """Fire whichever event moves the task to ``target``.

        A target equal to the current status is a no-op.

        Raises:
            TransitionNotAllowed: If ``target`` is unreachable from here.
        """
        if target == self.status:
            return
        events = {
            TaskStatus.PENDING: self.reopen,
            TaskStatus.IN_PROGRESS: self.start,
            TaskStatus.SCHEDULED: self.schedule,
            TaskStatus.COMPLETED: self.complete,
            TaskStatus.CANCELLED: self.cancel,
        }
        if target == TaskStatus.COMPLETED:
            events[target](user_id=user_id)
        else:
            events[target]()

    # Transition callbacks
    def on_start(self) -> None:
        self.task.status = TaskStatus.IN_PROGRESS
        logger.info("task_started", task_id=self.task.id)

    def on_schedule(self) -> None:
        self.task.status = TaskStatus.SCHEDULED
        logger.info("task_scheduled", task_id=self.task.id)

    def on_reopen(self) -> None:
        self.task.status = TaskStatus.PENDING
        logger.info("task_reopened", task_id=self.task.id)

    def on_complete(self, user_id: int | None = None) -> None:
        """Called when task completes.

        Args:
            user_id: ID of the user completing the task
        """
        self.task.status = TaskStatus.COMPLETED
        self.task.completed_at = utcnow()
        self.task.completed_by_id = user_id
        logger.info(
            "task_completed",
            task_id=self.task.id,
            completed_by_id=user_id,
        )

    def on_cancel(self) -> None:
        self.task.status = TaskStatus.CANCELLED
        logger.info("task_cancelled", task_id=self.task.id)


def create_state_machine(task: "Task") -> TaskStateMachine:
    """Factory function to create state machine for a task.

    Args:
        task: Task model instance

    Returns:
        TaskStateMachine initialized from task's current state
    """
    return TaskStateMachine(task=task)


__all__ = [
    "TaskStateMachine",
    "TransitionNotAllowed",
    "create_state_machine",
]
