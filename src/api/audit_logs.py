"""Audit log viewer and CSV export endpoints."""

from datetime import datetime

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.csv_export import csv_response
from src.api.deps import CurrentUser, DbSession
from src.core.config import settings
from src.storage.audit import AuditLogStorage

router = APIRouter(prefix="/api/audit-logs", tags=["audit-logs"])

EXPORT_HEADER = (
    "ID",
    "Action",
    "Resource Type",
    "Resource ID",
    "Details",
    "User",
    "Client",
    "Timestamp",
)


class AuditUser(BaseModel):
    id: int
    name: str
    avatar: str | None
    initials: str


class AuditClient(BaseModel):
    id: int
    name: str


class AuditLogResponse(BaseModel):
    """One audit entry with display fields."""

    id: int
    action: str
    resource_type: str
    resource_id: str | None
    details: str
    timestamp: datetime
    user: AuditUser
    client: AuditClient | None


class AuditLogListResponse(BaseModel):
    """Paginated audit log response."""

    items: list[AuditLogResponse]
    total: int
    page: int
    page_size: int


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    db: DbSession,
    user: CurrentUser,
    query: str | None = Query(default=None, min_length=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        alias="pageSize",
    ),
) -> AuditLogListResponse:
    """Page through audit logs, newest first.

    Viewing the audit log is not itself audited.
    """
    result = await AuditLogStorage(db).get_audit_logs(
        page=page, page_size=page_size, query=query
    )
    return AuditLogListResponse(**result)


@router.get("/export")
async def export_audit_logs(db: DbSession, audit: Audit) -> StreamingResponse:
    """Export the newest audit logs as CSV."""
    result = await AuditLogStorage(db).get_audit_logs(
        page=1, page_size=settings.audit_export_limit
    )
    rows = [
        (
            log["id"],
            log["action"],
            log["resource_type"],
            log["resource_id"],
            log["details"],
            log["user"]["name"],
            log["client"]["name"] if log["client"] else None,
            log["timestamp"].isoformat(),
        )
        for log in result["items"]
    ]
    audit.record("exported", "audit_log", "Exported audit logs to CSV")
    return csv_response("audit-logs.csv", EXPORT_HEADER, rows)
