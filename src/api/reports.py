"""Report series and CSV export endpoints."""

from typing import Any

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.csv_export import csv_response
from src.api.deps import DbSession
from src.storage.reports import ReportStorage, ReportType

router = APIRouter(prefix="/api/reports", tags=["reports"])


class ReportPoint(BaseModel):
    name: str
    value: int


class ReportResponse(BaseModel):
    """Chart series plus optional report-specific metadata."""

    data: list[ReportPoint]
    metadata: dict[str, Any] | None = None


@router.get("", response_model=ReportResponse, response_model_exclude_none=True)
async def get_report(
    db: DbSession,
    audit: Audit,
    report_type: ReportType = Query(alias="type"),
    time_range: str = Query(alias="timeRange", min_length=1),
) -> ReportResponse:
    """Report data for ``type`` over ``timeRange``.

    Unrecognized time ranges fall back to the last 30 days.
    """
    report = await ReportStorage(db).get_report_data(report_type.value, time_range)
    audit.record(
        "viewed",
        "report",
        f"Viewed {report_type.value} report with time range: {time_range}",
        resource_id=report_type.value,
    )
    return ReportResponse(**report)


@router.get("/export")
async def export_report(
    db: DbSession,
    audit: Audit,
    report_type: ReportType = Query(alias="type"),
    time_range: str = Query(alias="timeRange", min_length=1),
) -> StreamingResponse:
    """Export a report series as CSV."""
    report = await ReportStorage(db).get_report_data(report_type.value, time_range)
    audit.record(
        "exported",
        "report",
        f"Exported {report_type.value} report to CSV",
        resource_id=report_type.value,
    )
    return csv_response(
        f"{report_type.value}-report.csv",
        ("Name", "Value"),
        [(point["name"], point["value"]) for point in report["data"]],
    )
