"""SEO-Boost website and audit report endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict

from src.api.deps import CurrentUser, DbSession
from src.core.config import settings
from src.storage.schemas import SeoAuditCreate, WebsiteCreate, WebsiteUpdate
from src.storage.seo import SeoAuditStorage, WebsiteStorage

router = APIRouter(prefix="/api", tags=["seo"])


class WebsiteResponse(BaseModel):
    """Website response model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    url: str
    description: str | None
    seo_score: int | None
    last_analyzed_at: datetime | None
    created_at: datetime
    updated_at: datetime | None


class WebsiteListResponse(BaseModel):
    items: list[WebsiteResponse]
    total: int
    page: int
    page_size: int


class SeoAuditResponse(BaseModel):
    """Audit report response model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    website_id: int
    audit_date: datetime
    overall_score: int
    technical_score: int | None
    content_score: int | None
    performance_score: int | None
    issues: list[Any] | None
    recommendations: list[Any] | None


class SeoAuditListResponse(BaseModel):
    items: list[SeoAuditResponse]
    total: int
    page: int
    page_size: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


PageParam = Query(default=1, ge=1)
PageSizeParam = Query(
    default=settings.default_page_size,
    ge=1,
    le=settings.max_page_size,
    alias="pageSize",
)


@router.get("/websites", response_model=WebsiteListResponse)
async def list_websites(
    db: DbSession,
    user: CurrentUser,
    query: str | None = Query(default=None, min_length=1),
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> WebsiteListResponse:
    """List websites, searching name and URL."""
    result = await WebsiteStorage(db).list(page=page, page_size=page_size, query=query)
    return WebsiteListResponse.model_validate(result, from_attributes=True)


@router.get("/websites/{website_id}", response_model=WebsiteResponse)
async def get_website(website_id: int, db: DbSession, user: CurrentUser) -> WebsiteResponse:
    website = await WebsiteStorage(db).get_by_id(website_id)
    if website is None:
        raise HTTPException(status_code=404, detail="Website not found")
    return WebsiteResponse.model_validate(website)


@router.post("/websites", response_model=WebsiteResponse, status_code=status.HTTP_201_CREATED)
async def create_website(
    payload: WebsiteCreate,
    db: DbSession,
    user: CurrentUser,
) -> WebsiteResponse:
    website = await WebsiteStorage(db).create(payload, user_id=user.id)
    return WebsiteResponse.model_validate(website)


@router.patch("/websites/{website_id}", response_model=WebsiteResponse)
async def update_website(
    website_id: int,
    payload: WebsiteUpdate,
    db: DbSession,
    user: CurrentUser,
) -> WebsiteResponse:
    website = await WebsiteStorage(db).update(website_id, payload)
    return WebsiteResponse.model_validate(website)


@router.delete("/websites/{website_id}", response_model=DeleteResponse)
async def delete_website(website_id: int, db: DbSession, user: CurrentUser) -> DeleteResponse:
    await WebsiteStorage(db).delete(website_id)
    return DeleteResponse(success=True, message="Website deleted successfully")


@router.get("/websites/{website_id}/audits", response_model=SeoAuditListResponse)
async def list_audits(
    website_id: int,
    db: DbSession,
    user: CurrentUser,
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> SeoAuditListResponse:
    """Audit reports for a website, newest first."""
    result = await SeoAuditStorage(db).list(website_id, page=page, page_size=page_size)
    return SeoAuditListResponse.model_validate(result, from_attributes=True)


@router.get("/audits/{audit_id}", response_model=SeoAuditResponse)
async def get_audit(audit_id: int, db: DbSession, user: CurrentUser) -> SeoAuditResponse:
    audit = await SeoAuditStorage(db).get_by_id(audit_id)
    if audit is None:
        raise HTTPException(status_code=404, detail="Audit not found")
    return SeoAuditResponse.model_validate(audit)


@router.post("/audits", response_model=SeoAuditResponse, status_code=status.HTTP_201_CREATED)
async def create_audit(
    payload: SeoAuditCreate,
    db: DbSession,
    user: CurrentUser,
) -> SeoAuditResponse:
    """Store an audit report and refresh the website's score."""
    audit = await SeoAuditStorage(db).create(payload)
    return SeoAuditResponse.model_validate(audit)
