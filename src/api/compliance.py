"""Compliance status endpoints."""

from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.deps import CurrentUser, DbSession
from src.models.log import ComplianceMetric
from src.storage.compliance import ComplianceStorage, compliance_status, metric_percentage
from src.storage.schemas import ComplianceMetricCreate, ComplianceMetricUpdate

router = APIRouter(prefix="/api/compliance", tags=["compliance"])


class ComplianceItem(BaseModel):
    id: int
    name: str
    category: str
    percentage: int
    status: str


class ComplianceAlert(BaseModel):
    title: str
    message: str


class ComplianceResponse(BaseModel):
    """Per-metric status and an optional alert."""

    compliance: list[ComplianceItem]
    alert: ComplianceAlert | None


class ComplianceMetricResponse(BaseModel):
    """A stored metric with its derived percentage and tier."""

    id: int
    name: str
    category: str
    score: int
    target_score: int
    percentage: int
    status: str
    notes: str | None
    last_updated: datetime
    updated_by_id: int | None


def _to_metric_response(metric: ComplianceMetric) -> ComplianceMetricResponse:
    value = metric_percentage(metric)
    return ComplianceMetricResponse(
        id=metric.id,
        name=metric.name,
        category=metric.category,
        score=metric.score,
        target_score=metric.target_score,
        percentage=value,
        status=compliance_status(value),
        notes=metric.notes,
        last_updated=metric.last_updated,
        updated_by_id=metric.updated_by_id,
    )


@router.get("", response_model=ComplianceResponse)
async def get_compliance(db: DbSession, user: CurrentUser) -> ComplianceResponse:
    """Compliance percentages, tiers and alert."""
    return ComplianceResponse(**await ComplianceStorage(db).get_compliance_metrics())


@router.post(
    "/metrics",
    response_model=ComplianceMetricResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_metric(
    payload: ComplianceMetricCreate,
    db: DbSession,
    audit: Audit,
) -> ComplianceMetricResponse:
    metric = await ComplianceStorage(db).create_metric(payload, user_id=audit.user.id)
    audit.record(
        "created",
        "compliance_metric",
        f"Created compliance metric: {metric.name}",
        resource_id=metric.id,
    )
    return _to_metric_response(metric)


@router.patch("/metrics/{metric_id}", response_model=ComplianceMetricResponse)
async def update_metric(
    metric_id: int,
    payload: ComplianceMetricUpdate,
    db: DbSession,
    audit: Audit,
) -> ComplianceMetricResponse:
    metric = await ComplianceStorage(db).update_metric(
        metric_id, payload, user_id=audit.user.id
    )
    audit.record(
        "updated",
        "compliance_metric",
        f"Updated compliance metric: {metric.name}",
        resource_id=metric_id,
    )
    return _to_metric_response(metric)
