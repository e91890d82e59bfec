"""Data-access layer: one storage class per entity group."""

from src.storage.activities import ActivityStorage
from src.storage.audit import AuditLogStorage
from src.storage.clients import ClientStorage
from src.storage.compliance import ComplianceStorage
from src.storage.errors import (
    NotFoundError,
    ReportTypeNotSupported,
    StorageError,
    TaskTransitionError,
    ValidationError,
)
from src.storage.metrics import DashboardMetrics
from src.storage.reports import ReportStorage
from src.storage.seo import (
    BacklinkStorage,
    ContentOptimizationStorage,
    KeywordStorage,
    OnPageOptimizationStorage,
    SeoAuditStorage,
    SeoDashboard,
    WebsiteStorage,
)
from src.storage.settings import SettingsStorage
from src.storage.tasks import TaskStorage
from src.storage.users import UserStorage

__all__ = [
    "ActivityStorage",
    "AuditLogStorage",
    "BacklinkStorage",
    "ClientStorage",
    "ComplianceStorage",
    "ContentOptimizationStorage",
    "DashboardMetrics",
    "KeywordStorage",
    "NotFoundError",
    "OnPageOptimizationStorage",
    "ReportStorage",
    "ReportTypeNotSupported",
    "SeoAuditStorage",
    "SeoDashboard",
    "SettingsStorage",
    "StorageError",
    "TaskStorage",
    "TaskTransitionError",
    "UserStorage",
    "ValidationError",
    "WebsiteStorage",
]
