"""Input schemas shared by the storage layer and the request bodies."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.models.client import ActivityType
from src.models.seo import BacklinkStatus, Impact, SuggestionStatus
from src.models.task import TaskPriority, TaskStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^https?://[^\s/$.?#].[^\s]*$"


class ClientCreate(BaseModel):
    """Fields accepted when creating a client."""

    name: str = Field(min_length=2, max_length=255)
    industry: str = Field(min_length=1, max_length=255)
    contact_name: str = Field(min_length=2, max_length=255)
    contact_email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    contact_phone: str = Field(min_length=5, max_length=50)
    address: str | None = None
    notes: str | None = None


class ClientUpdate(BaseModel):
    """Partial client update; only fields that are sent are written."""

    name: str | None = Field(default=None, min_length=2, max_length=255)
    industry: str | None = Field(default=None, min_length=1, max_length=255)
    contact_name: str | None = Field(default=None, min_length=2, max_length=255)
    contact_email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    contact_phone: str | None = Field(default=None, min_length=5, max_length=50)
    address: str | None = None
    notes: str | None = None


class TaskCreate(BaseModel):
    """Fields accepted when creating a task."""

    client_id: int = Field(gt=0)
    description: str = Field(min_length=5)
    due_date: datetime
    priority: TaskPriority = TaskPriority.NORMAL
    status: TaskStatus = TaskStatus.PENDING
    assigned_to_id: int | None = Field(default=None, gt=0)
    notes: str | None = None


class TaskUpdate(BaseModel):
    """Partial task update. Status changes go through the state machine."""

    description: str | None = Field(default=None, min_length=5)
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assigned_to_id: int | None = Field(default=None, gt=0)
    notes: str | None = None


class ActivityCreate(BaseModel):
    """An activity appended to a client's timeline."""

    client_id: int = Field(gt=0)
    user_id: int = Field(gt=0)
    type: ActivityType
    message: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class AuditLogCreate(BaseModel):
    """One audit event."""

    user_id: int = Field(gt=0)
    action: str = Field(min_length=1, max_length=50)
    resource_type: str = Field(min_length=1, max_length=50)
    resource_id: str | None = Field(default=None, max_length=100)
    details: str
    client_id: int | None = None
    ip_address: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=500)
    metadata: dict[str, Any] | None = None


class ComplianceMetricCreate(BaseModel):
    """A new compliance metric."""

    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    score: int = Field(ge=0)
    target_score: int = Field(gt=0)
    notes: str | None = None


class ComplianceMetricUpdate(BaseModel):
    """Partial compliance metric update."""

    score: int | None = Field(default=None, ge=0)
    target_score: int | None = Field(default=None, gt=0)
    notes: str | None = None


class WebsiteCreate(BaseModel):
    """Fields accepted when adding a website."""

    name: str = Field(min_length=1, max_length=255)
    url: str = Field(pattern=URL_PATTERN, max_length=500)
    description: str | None = None


class WebsiteUpdate(BaseModel):
    """Partial website update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    url: str | None = Field(default=None, pattern=URL_PATTERN, max_length=500)
    description: str | None = None


class SeoAuditCreate(BaseModel):
    """A completed audit report for a website."""

    website_id: int = Field(gt=0)
    overall_score: int = Field(ge=0, le=100)
    technical_score: int | None = Field(default=None, ge=0, le=100)
    content_score: int | None = Field(default=None, ge=0, le=100)
    performance_score: int | None = Field(default=None, ge=0, le=100)
    issues: list[dict[str, Any]] = Field(default_factory=list)
    recommendations: list[dict[str, Any]] = Field(default_factory=list)


class KeywordCreate(BaseModel):
    """A keyword to track for a website."""

    website_id: int = Field(gt=0)
    keyword: str = Field(min_length=1, max_length=255)
    search_volume: int | None = Field(default=None, ge=0)
    difficulty: int | None = Field(default=None, ge=0, le=100)
    cpc: float | None = Field(default=None, ge=0)
    intent: str | None = Field(default=None, max_length=50)
    current_ranking: int | None = Field(default=None, ge=1)
    previous_ranking: int | None = Field(default=None, ge=1)
    target_url: str | None = Field(default=None, max_length=500)


class KeywordUpdate(BaseModel):
    """Partial keyword update."""

    keyword: str | None = Field(default=None, min_length=1, max_length=255)
    search_volume: int | None = Field(default=None, ge=0)
    difficulty: int | None = Field(default=None, ge=0, le=100)
    cpc: float | None = Field(default=None, ge=0)
    intent: str | None = Field(default=None, max_length=50)
    current_ranking: int | None = Field(default=None, ge=1)
    previous_ranking: int | None = Field(default=None, ge=1)
    target_url: str | None = Field(default=None, max_length=500)


class ContentOptimizationCreate(BaseModel):
    """A content rewrite for one page and keyword."""

    website_id: int = Field(gt=0)
    page_url: str = Field(min_length=1, max_length=500)
    target_keyword: str = Field(min_length=1, max_length=255)
    original_content: str = Field(min_length=1)
    optimized_content: str | None = None
    seo_score: int | None = Field(default=None, ge=0, le=100)
    readability_score: int | None = Field(default=None, ge=0, le=100)
    optimization_settings: dict[str, Any] | None = None
    ai_generation_prompt: str | None = None


class BacklinkCreate(BaseModel):
    """A discovered inbound link."""

    website_id: int = Field(gt=0)
    source_url: str = Field(pattern=URL_PATTERN, max_length=500)
    target_url: str = Field(pattern=URL_PATTERN, max_length=500)
    anchor_text: str | None = Field(default=None, max_length=500)
    domain_authority: int | None = Field(default=None, ge=0, le=100)
    toxicity_score: int = Field(default=0, ge=0, le=100)
    status: BacklinkStatus = BacklinkStatus.ACTIVE


class OnPageOptimizationCreate(BaseModel):
    """A suggested change to a page element."""

    website_id: int = Field(gt=0)
    page_url: str = Field(min_length=1, max_length=500)
    element_type: str = Field(min_length=1, max_length=50)
    current_value: str | None = None
    suggested_value: str = Field(min_length=1)
    impact: Impact = Impact.MEDIUM
    status: SuggestionStatus = SuggestionStatus.PENDING
