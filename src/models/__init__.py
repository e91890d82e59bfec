"""SQLAlchemy models for the ClientDesk application."""

from src.models.base import Base
from src.models.client import Activity, ActivityType, Client
from src.models.log import AuditLog, ComplianceMetric, Setting
from src.models.seo import (
    Backlink,
    BacklinkStatus,
    ContentOptimization,
    Impact,
    Keyword,
    OnPageOptimization,
    SeoAudit,
    SuggestionStatus,
    Website,
)
from src.models.task import Task, TaskPriority, TaskStatus
from src.models.user import User

__all__ = [
    "Base",
    "User",
    "Client",
    "Activity",
    "ActivityType",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "AuditLog",
    "Setting",
    "ComplianceMetric",
    "Website",
    "Keyword",
    "Backlink",
    "BacklinkStatus",
    "ContentOptimization",
    "OnPageOptimization",
    "SeoAudit",
    "SuggestionStatus",
    "Impact",
]
