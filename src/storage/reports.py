"""Time-bucketed report series for the reports page and CSV export."""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.base import utcnow
from src.models.client import Activity, Client
from src.models.log import ComplianceMetric
from src.models.task import Task
from src.storage.base import percentage
from src.storage.errors import ReportTypeNotSupported

logger = get_logger(__name__)


class ReportType(str, enum.Enum):
    """Supported report series."""

    CLIENT_ACTIVITY = "client-activity"
    TASK_COMPLETION = "task-completion"
    CLIENT_DISTRIBUTION = "client-distribution"
    COMPLIANCE_SCORE = "compliance-score"


class TimeRange(str, enum.Enum):
    """Named reporting windows."""

    LAST_7 = "last7"
    LAST_30 = "last30"
    LAST_90 = "last90"
    THIS_YEAR = "thisYear"


class Granularity(str, enum.Enum):
    DAY = "day"
    MONTH = "month"


# Bucket label formats per dialect.
_PG_FORMATS = {Granularity.DAY: "YYYY-MM-DD", Granularity.MONTH: "YYYY-MM"}
_SQLITE_FORMATS = {Granularity.DAY: "%Y-%m-%d", Granularity.MONTH: "%Y-%m"}

_WINDOW_DAYS = {TimeRange.LAST_7: 7, TimeRange.LAST_30: 30, TimeRange.LAST_90: 90}


@dataclass(frozen=True)
class DateRange:
    """Resolved reporting window."""

    start: datetime
    end: datetime
    granularity: Granularity


def resolve_date_range(time_range: str, now: datetime | None = None) -> DateRange:
    """Map a named window to concrete bounds and a bucket size.

    Rolling windows bucket by day; ``thisYear`` starts on January 1st and
    buckets by month. Unrecognized names fall back to the last 30 days.
    """
    end = now or utcnow()
    if time_range == TimeRange.THIS_YEAR.value:
        start = datetime(end.year, 1, 1)
        return DateRange(start=start, end=end, granularity=Granularity.MONTH)

    try:
        days = _WINDOW_DAYS[TimeRange(time_range)]
    except (ValueError, KeyError):
        days = 30
    return DateRange(start=end - timedelta(days=days), end=end, granularity=Granularity.DAY)


class ReportStorage:
    """Builds ``{data: [{name, value}], metadata?}`` report payloads."""

    def __init__(self, session: AsyncSession, now: datetime | None = None):
        self.session = session
        self.now = now

    async def get_report_data(self, report_type: str, time_range: str) -> dict[str, Any]:
        """Dispatch to the generator for ``report_type``.

        Raises:
            ReportTypeNotSupported: If no generator exists for the type.
        """
        generators = {
            ReportType.CLIENT_ACTIVITY.value: self._client_activity,
            ReportType.TASK_COMPLETION.value: self._task_completion,
            ReportType.CLIENT_DISTRIBUTION.value: self._client_distribution,
            ReportType.COMPLIANCE_SCORE.value: self._compliance_score,
        }
        generator = generators.get(str(report_type))
        if generator is None:
            raise ReportTypeNotSupported(str(report_type))

        report = await generator(resolve_date_range(time_range, self.now))
        logger.info(
            "report_generated",
            report_type=report_type,
            time_range=time_range,
            buckets=len(report["data"]),
        )
        return report

    def _bucket(self, column: Any, granularity: Granularity) -> Any:
        """Date-bucket label expression for the bound database dialect."""
        if self.session.get_bind().dialect.name == "postgresql":
            return func.to_char(column, _PG_FORMATS[granularity])
        return func.strftime(_SQLITE_FORMATS[granularity], column)

    async def _client_activity(self, window: DateRange) -> dict[str, Any]:
        bucket = self._bucket(Activity.timestamp, window.granularity).label("bucket")
        result = await self.session.execute(
            select(bucket, func.count(Activity.id))
            .where(Activity.timestamp >= window.start, Activity.timestamp <= window.end)
            .group_by(bucket)
            .order_by(bucket)
        )
        return {"data": [{"name": name, "value": int(count)} for name, count in result.all()]}

    async def _task_completion(self, window: DateRange) -> dict[str, Any]:
        """Completed tasks per bucket plus a completion rate.

        The rate divides tasks completed in the window (by ``completed_at``)
        by tasks created in the window (by ``created_at``), so it can exceed
        100 when older tasks are closed inside the window.
        """
        in_window = (
            Task.completed_at.is_not(None),
            Task.completed_at >= window.start,
            Task.completed_at <= window.end,
        )
        bucket = self._bucket(Task.completed_at, window.granularity).label("bucket")
        result = await self.session.execute(
            select(bucket, func.count(Task.id))
            .where(*in_window)
            .group_by(bucket)
            .order_by(bucket)
        )
        data = [{"name": name, "value": int(count)} for name, count in result.all()]

        created_result = await self.session.execute(
            select(func.count(Task.id)).where(
                Task.created_at >= window.start,
                Task.created_at <= window.end,
            )
        )
        completed_result = await self.session.execute(
            select(func.count(Task.id)).where(*in_window)
        )
        created = int(created_result.scalar() or 0)
        completed = int(completed_result.scalar() or 0)

        return {
            "data": data,
            "metadata": {"completion_rate": percentage(completed, created)},
        }

    async def _client_distribution(self, window: DateRange) -> dict[str, Any]:
        count = func.count(Client.id).label("clients")
        result = await self.session.execute(
            select(Client.industry, count)
            .group_by(Client.industry)
            .order_by(count.desc(), Client.industry.asc())
        )
        return {
            "data": [{"name": industry, "value": int(total)} for industry, total in result.all()]
        }

    async def _compliance_score(self, window: DateRange) -> dict[str, Any]:
        result = await self.session.execute(
            select(ComplianceMetric).order_by(ComplianceMetric.id)
        )
        return {
            "data": [
                {"name": metric.name, "value": percentage(metric.score, metric.target_score)}
                for metric in result.scalars().all()
            ]
        }
