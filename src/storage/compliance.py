"""Compliance metrics, status tiers and dashboard alerting."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.base import utcnow
from src.models.log import ComplianceMetric
from src.storage.base import percentage, validate
from src.storage.errors import NotFoundError
from src.storage.schemas import ComplianceMetricCreate, ComplianceMetricUpdate

logger = get_logger(__name__)

ALERT_THRESHOLD = 80


def compliance_status(value: int) -> str:
    """Status tier for a compliance percentage.

    Anything under 80 is ``error``; there is no separate tier for 60-79.
    """
    if value >= 90:
        return "success"
    if value >= 80:
        return "warning"
    return "error"


def metric_percentage(metric: ComplianceMetric) -> int:
    return percentage(metric.score, metric.target_score)


class ComplianceStorage:
    """Reads and maintains compliance metrics."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_metrics(self) -> list[ComplianceMetric]:
        result = await self.session.execute(
            select(ComplianceMetric).order_by(ComplianceMetric.id)
        )
        return list(result.scalars().all())

    async def get_compliance_metrics(self) -> dict[str, Any]:
        """Per-metric percentage and tier, plus an alert when any is below 80.

        The alert names the metric with the lowest percentage; ties go to
        the one stored first.
        """
        compliance = [
            {
                "id": metric.id,
                "name": metric.name,
                "category": metric.category,
                "percentage": metric_percentage(metric),
                "status": compliance_status(metric_percentage(metric)),
            }
            for metric in await self.list_metrics()
        ]

        flagged = [item for item in compliance if item["percentage"] < ALERT_THRESHOLD]
        alert = None
        if flagged:
            lowest = min(flagged, key=lambda item: item["percentage"])
            alert = {
                "title": "Compliance Alert",
                "message": (
                    f"{len(flagged)} areas need attention. "
                    f"{lowest['name']} has the lowest score."
                ),
            }
        return {"compliance": compliance, "alert": alert}

    async def create_metric(
        self,
        data: ComplianceMetricCreate | dict[str, Any],
        user_id: int | None = None,
    ) -> ComplianceMetric:
        payload = validate(ComplianceMetricCreate, data)
        metric = ComplianceMetric(**payload.model_dump(), updated_by_id=user_id)
        self.session.add(metric)
        await self.session.flush()
        return metric

    async def update_metric(
        self,
        metric_id: int,
        data: ComplianceMetricUpdate | dict[str, Any],
        user_id: int | None = None,
    ) -> ComplianceMetric:
        """Update score, target or notes and stamp who changed it."""
        payload = validate(ComplianceMetricUpdate, data)
        metric = await self.session.get(ComplianceMetric, metric_id)
        if metric is None:
            raise NotFoundError("Compliance metric", metric_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field != "notes":
                continue
            setattr(metric, field, value)
        metric.last_updated = utcnow()
        metric.updated_by_id = user_id
        await self.session.flush()
        logger.info(
            "compliance_metric_updated",
            metric_id=metric.id,
            percentage=metric_percentage(metric),
        )
        return metric
