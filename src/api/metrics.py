"""Dashboard metrics endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from src.api.deps import CurrentUser, DbSession
from src.storage.metrics import DashboardMetrics

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


class Trend(BaseModel):
    value: str
    direction: str
    label: str


class Counter(BaseModel):
    value: int | str
    trend: Trend


class MetricsResponse(BaseModel):
    """The four dashboard counters."""

    active_clients: Counter
    pending_tasks: Counter
    follow_ups_today: Counter
    compliance_score: Counter


@router.get("", response_model=MetricsResponse)
async def get_metrics(db: DbSession, user: CurrentUser) -> MetricsResponse:
    return MetricsResponse(**await DashboardMetrics(db).get_metrics())
