"""API module exports."""

from src.api.activities import router as activities_router
from src.api.ai import router as ai_router
from src.api.audit_logs import router as audit_logs_router
from src.api.auth import router as auth_router
from src.api.clients import router as clients_router
from src.api.compliance import router as compliance_router
from src.api.deps import get_current_user, get_db
from src.api.health import router as health_router
from src.api.metrics import router as metrics_router
from src.api.reports import router as reports_router
from src.api.seo import router as seo_router
from src.api.settings import router as settings_router
from src.api.tasks import router as tasks_router
from src.api.websites import router as websites_router

__all__ = [
    "activities_router",
    "ai_router",
    "audit_logs_router",
    "auth_router",
    "clients_router",
    "compliance_router",
    "get_current_user",
    "get_db",
    "health_router",
    "metrics_router",
    "reports_router",
    "seo_router",
    "settings_router",
    "tasks_router",
    "websites_router",
]
