"""Task-related SQLAlchemy models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.client import Client
    from src.models.user import User


class TaskStatus(str, enum.Enum):
    """Enumeration of possible task statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in progress"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    """Enumeration of task priorities."""

    HIGH = "high"
    MEDIUM = "medium"
    NORMAL = "normal"
    LOW = "low"


class Task(Base, TimestampMixin):
    """Represents a follow-up owed to a client.

    ``completed_at`` and ``completed_by_id`` are only written by the task
    state machine, which keeps them paired with ``status == COMPLETED``.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_to_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority), default=TaskPriority.NORMAL, nullable=False
    )
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus), default=TaskStatus.PENDING, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)
    completed_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))

    # Relationships
    client: Mapped["Client"] = relationship(back_populates="tasks")
    assigned_to: Mapped["User"] = relationship(foreign_keys=[assigned_to_id])
    completed_by: Mapped["User | None"] = relationship(foreign_keys=[completed_by_id])
