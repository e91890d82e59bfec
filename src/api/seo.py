"""SEO-Boost keyword, content, backlink, on-page and dashboard endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict

from src.api.deps import CurrentUser, DbSession
from src.api.websites import DeleteResponse, PageParam, PageSizeParam
from src.models.seo import BacklinkStatus, Impact, SuggestionStatus
from src.storage.schemas import (
    BacklinkCreate,
    ContentOptimizationCreate,
    KeywordCreate,
    KeywordUpdate,
    OnPageOptimizationCreate,
)
from src.storage.seo import (
    BacklinkStorage,
    ContentOptimizationStorage,
    KeywordStorage,
    OnPageOptimizationStorage,
    SeoDashboard,
)

router = APIRouter(prefix="/api", tags=["seo"])


class KeywordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    website_id: int
    keyword: str
    search_volume: int | None
    difficulty: int | None
    cpc: float | None
    intent: str | None
    current_ranking: int | None
    previous_ranking: int | None
    target_url: str | None
    created_at: datetime
    updated_at: datetime | None


class ContentOptimizationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    website_id: int
    page_url: str
    target_keyword: str
    original_content: str
    optimized_content: str | None
    seo_score: int | None
    readability_score: int | None
    optimization_date: datetime
    optimization_settings: dict[str, Any] | None
    ai_generation_prompt: str | None


class BacklinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    website_id: int
    source_url: str
    target_url: str
    anchor_text: str | None
    domain_authority: int | None
    toxicity_score: int
    status: BacklinkStatus
    first_discovered: datetime
    last_checked: datetime


class OnPageOptimizationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    website_id: int
    page_url: str
    element_type: str
    current_value: str | None
    suggested_value: str
    impact: Impact
    status: SuggestionStatus
    created_at: datetime
    applied_at: datetime | None


class KeywordListResponse(BaseModel):
    items: list[KeywordResponse]
    total: int
    page: int
    page_size: int


class ContentOptimizationListResponse(BaseModel):
    items: list[ContentOptimizationResponse]
    total: int
    page: int
    page_size: int


class BacklinkListResponse(BaseModel):
    items: list[BacklinkResponse]
    total: int
    page: int
    page_size: int


class OnPageOptimizationListResponse(BaseModel):
    items: list[OnPageOptimizationResponse]
    total: int
    page: int
    page_size: int


class BacklinkStatusUpdate(BaseModel):
    status: BacklinkStatus


class SuggestionStatusUpdate(BaseModel):
    status: SuggestionStatus


class SeoDashboardResponse(BaseModel):
    """Aggregate SEO counters."""

    website_stats: dict[str, Any]
    keyword_stats: dict[str, Any]
    backlink_stats: dict[str, Any]
    content_stats: dict[str, Any]


# Keywords


@router.get("/websites/{website_id}/keywords", response_model=KeywordListResponse)
async def list_keywords(
    website_id: int,
    db: DbSession,
    user: CurrentUser,
    query: str | None = Query(default=None, min_length=1),
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> KeywordListResponse:
    result = await KeywordStorage(db).list(
        website_id, page=page, page_size=page_size, query=query
    )
    return KeywordListResponse.model_validate(result, from_attributes=True)


@router.post("/keywords", response_model=KeywordResponse, status_code=status.HTTP_201_CREATED)
async def create_keyword(
    payload: KeywordCreate,
    db: DbSession,
    user: CurrentUser,
) -> KeywordResponse:
    return KeywordResponse.model_validate(await KeywordStorage(db).create(payload))


@router.patch("/keywords/{keyword_id}", response_model=KeywordResponse)
async def update_keyword(
    keyword_id: int,
    payload: KeywordUpdate,
    db: DbSession,
    user: CurrentUser,
) -> KeywordResponse:
    return KeywordResponse.model_validate(await KeywordStorage(db).update(keyword_id, payload))


@router.delete("/keywords/{keyword_id}", response_model=DeleteResponse)
async def delete_keyword(keyword_id: int, db: DbSession, user: CurrentUser) -> DeleteResponse:
    await KeywordStorage(db).delete(keyword_id)
    return DeleteResponse(success=True, message="Keyword deleted successfully")


# Content optimizations


@router.get(
    "/websites/{website_id}/content-optimizations",
    response_model=ContentOptimizationListResponse,
)
async def list_content_optimizations(
    website_id: int,
    db: DbSession,
    user: CurrentUser,
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> ContentOptimizationListResponse:
    result = await ContentOptimizationStorage(db).list(
        website_id, page=page, page_size=page_size
    )
    return ContentOptimizationListResponse.model_validate(result, from_attributes=True)


@router.get(
    "/content-optimizations/{optimization_id}",
    response_model=ContentOptimizationResponse,
)
async def get_content_optimization(
    optimization_id: int,
    db: DbSession,
    user: CurrentUser,
) -> ContentOptimizationResponse:
    optimization = await ContentOptimizationStorage(db).get_by_id(optimization_id)
    if optimization is None:
        raise HTTPException(status_code=404, detail="Content optimization not found")
    return ContentOptimizationResponse.model_validate(optimization)


@router.post(
    "/content-optimizations",
    response_model=ContentOptimizationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_content_optimization(
    payload: ContentOptimizationCreate,
    db: DbSession,
    user: CurrentUser,
) -> ContentOptimizationResponse:
    optimization = await ContentOptimizationStorage(db).create(payload)
    return ContentOptimizationResponse.model_validate(optimization)


# Backlinks


@router.get("/websites/{website_id}/backlinks", response_model=BacklinkListResponse)
async def list_backlinks(
    website_id: int,
    db: DbSession,
    user: CurrentUser,
    toxic: bool = Query(default=False),
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> BacklinkListResponse:
    """Backlinks for a website; ``toxic=true`` keeps toxicity above 50."""
    result = await BacklinkStorage(db).list(
        website_id, page=page, page_size=page_size, toxic=toxic
    )
    return BacklinkListResponse.model_validate(result, from_attributes=True)


@router.post("/backlinks", response_model=BacklinkResponse, status_code=status.HTTP_201_CREATED)
async def create_backlink(
    payload: BacklinkCreate,
    db: DbSession,
    user: CurrentUser,
) -> BacklinkResponse:
    return BacklinkResponse.model_validate(await BacklinkStorage(db).create(payload))


@router.patch("/backlinks/{backlink_id}/status", response_model=BacklinkResponse)
async def update_backlink_status(
    backlink_id: int,
    payload: BacklinkStatusUpdate,
    db: DbSession,
    user: CurrentUser,
) -> BacklinkResponse:
    backlink = await BacklinkStorage(db).update_status(backlink_id, payload.status)
    return BacklinkResponse.model_validate(backlink)


# On-page optimizations


@router.get(
    "/websites/{website_id}/on-page-optimizations",
    response_model=OnPageOptimizationListResponse,
)
async def list_on_page_optimizations(
    website_id: int,
    db: DbSession,
    user: CurrentUser,
    page_url: str | None = Query(default=None, alias="pageUrl", min_length=1),
    page: int = PageParam,
    page_size: int = PageSizeParam,
) -> OnPageOptimizationListResponse:
    result = await OnPageOptimizationStorage(db).list(
        website_id, page=page, page_size=page_size, page_url=page_url
    )
    return OnPageOptimizationListResponse.model_validate(result, from_attributes=True)


@router.post(
    "/on-page-optimizations",
    response_model=OnPageOptimizationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_on_page_optimization(
    payload: OnPageOptimizationCreate,
    db: DbSession,
    user: CurrentUser,
) -> OnPageOptimizationResponse:
    suggestion = await OnPageOptimizationStorage(db).create(payload)
    return OnPageOptimizationResponse.model_validate(suggestion)


@router.patch(
    "/on-page-optimizations/{suggestion_id}/status",
    response_model=OnPageOptimizationResponse,
)
async def update_on_page_optimization_status(
    suggestion_id: int,
    payload: SuggestionStatusUpdate,
    db: DbSession,
    user: CurrentUser,
) -> OnPageOptimizationResponse:
    suggestion = await OnPageOptimizationStorage(db).update_status(
        suggestion_id, payload.status
    )
    return OnPageOptimizationResponse.model_validate(suggestion)


# Dashboard


@router.get("/seo/dashboard", response_model=SeoDashboardResponse)
async def seo_dashboard(db: DbSession, user: CurrentUser) -> SeoDashboardResponse:
    return SeoDashboardResponse(**await SeoDashboard(db).get_metrics())
