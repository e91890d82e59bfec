"""Dashboard counters for the project-management home page."""

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.client import Client
from src.models.log import ComplianceMetric
from src.models.task import Task, TaskPriority, TaskStatus
from src.storage.base import percentage


def trend(value: str, direction: str, label: str) -> dict[str, str]:
    """Build a ``{value, direction, label}`` trend descriptor."""
    return {"value": value, "direction": direction, "label": label}


class DashboardMetrics:
    """Computes the four dashboard counters and their trend descriptors.

    Trends are ratios against the current totals, recomputed on every call;
    there is no stored history behind them.
    """

    def __init__(self, session: AsyncSession, now: datetime | None = None):
        self.session = session
        self.now = now

    async def get_metrics(self) -> dict[str, Any]:
        now = self.now or utcnow()
        return {
            "active_clients": await self._active_clients(now),
            "pending_tasks": await self._pending_tasks(now),
            "follow_ups_today": await self._follow_ups_today(now),
            "compliance_score": await self._compliance_score(),
        }

    async def _scalar(self, stmt: Any) -> int:
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def _active_clients(self, now: datetime) -> dict[str, Any]:
        total = await self._scalar(select(func.count(Client.id)))
        recent = await self._scalar(
            select(func.count(Client.id)).where(
                Client.created_at >= now - timedelta(days=30)
            )
        )
        return {
            "value": total,
            "trend": trend(
                f"{percentage(recent, total)}%",
                "up" if recent > 0 else "neutral",
                "from last month",
            ),
        }

    async def _pending_tasks(self, now: datetime) -> dict[str, Any]:
        pending = await self._scalar(
            select(func.count(Task.id)).where(
                Task.status == TaskStatus.PENDING,
                Task.completed_at.is_(None),
            )
        )
        recent = await self._scalar(
            select(func.count(Task.id)).where(
                Task.status == TaskStatus.PENDING,
                Task.created_at >= now - timedelta(days=7),
            )
        )
        return {
            "value": pending,
            "trend": trend(
                f"{percentage(recent, pending or 1)}%",
                "up",
                "from last week",
            ),
        }

    async def _follow_ups_today(self, now: datetime) -> dict[str, Any]:
        """Open tasks due in ``[today 00:00, tomorrow 00:00)`` UTC."""
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        due_today = (
            Task.due_date >= today,
            Task.due_date < today + timedelta(days=1),
            Task.completed_at.is_(None),
        )
        total = await self._scalar(select(func.count(Task.id)).where(*due_today))
        high = await self._scalar(
            select(func.count(Task.id)).where(
                *due_today, Task.priority == TaskPriority.HIGH
            )
        )
        return {"value": total, "trend": trend(str(high), "neutral", "high priority")}

    async def _compliance_score(self) -> dict[str, Any]:
        result = await self.session.execute(
            select(
                func.sum(ComplianceMetric.score),
                func.sum(ComplianceMetric.target_score),
            )
        )
        score, target = result.one()
        return {
            "value": f"{percentage(score, target)}%",
            "trend": trend("All audit logs complete", "up", ""),
        }
