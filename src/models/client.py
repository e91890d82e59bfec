"""Client-related SQLAlchemy models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, JSONType, TimestampMixin, utcnow

if TYPE_CHECKING:
    from src.models.task import Task
    from src.models.user import User


class ActivityType(str, enum.Enum):
    """Kinds of client activity shown on the dashboard feed."""

    CLIENT_REPLY = "client-reply"
    APPROVAL = "approval"
    MEETING_SCHEDULED = "meeting-scheduled"
    INFORMATION_REQUEST = "information-request"
    ISSUE_FLAGGED = "issue-flagged"


class Client(Base, TimestampMixin):
    """Represents a business contact tracked by the team."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    tasks: Mapped[list["Task"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    activities: Mapped[list["Activity"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )


class Activity(Base):
    """Represents an immutable, timestamped event on a client's timeline.

    Append-only: rows are never updated or deleted individually.
    """

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    type: Mapped[ActivityType] = mapped_column(Enum(ActivityType), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )
    extra: Mapped[dict | None] = mapped_column("metadata", JSONType)

    # Relationships
    client: Mapped["Client"] = relationship(back_populates="activities")
    user: Mapped["User"] = relationship()
