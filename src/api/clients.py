"""Clients API endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.deps import CurrentUser, DbSession
from src.core.config import settings
from src.models.client import Client
from src.storage.clients import ClientStorage, client_to_dict
from src.storage.schemas import ClientCreate, ClientUpdate

router = APIRouter(prefix="/api/clients", tags=["clients"])


class ClientResponse(BaseModel):
    """Client response model."""

    id: int
    name: str
    industry: str
    contact_name: str
    contact_email: str
    contact_phone: str
    address: str | None
    notes: str | None
    initials: str
    created_at: datetime
    updated_at: datetime | None


class ClientListItem(ClientResponse):
    """Client row with open-task count and last activity time."""

    pending_tasks: int
    last_activity: datetime | None


class ClientActivity(BaseModel):
    id: int
    type: str
    message: str
    timestamp: datetime
    user_id: int
    metadata: dict[str, Any] | None


class ClientDetailResponse(ClientResponse):
    """Client detail with task counts and recent activity."""

    pending_tasks: int
    total_tasks: int
    recent_activities: list[ClientActivity]


class ClientListResponse(BaseModel):
    """Paginated client list response."""

    items: list[ClientListItem]
    total: int
    page: int
    page_size: int


class ClientOption(BaseModel):
    id: int
    name: str
    industry: str


class ClientOptionsResponse(BaseModel):
    clients: list[ClientOption]


class DeleteResponse(BaseModel):
    success: bool
    message: str


def _to_client_response(client: Client) -> ClientResponse:
    """Map SQLAlchemy client model to response model."""
    return ClientResponse(**client_to_dict(client))


@router.get("", response_model=ClientListResponse)
async def list_clients(
    db: DbSession,
    audit: Audit,
    query: str | None = Query(default=None, min_length=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        alias="pageSize",
    ),
) -> ClientListResponse:
    """List clients with optional search and pagination."""
    result = await ClientStorage(db).list(page=page, page_size=page_size, query=query)
    audit.record(
        "viewed",
        "client",
        f'Viewed client list with search: "{query}"' if query else "Viewed client list",
    )
    return ClientListResponse(**result)


@router.get("/list", response_model=ClientOptionsResponse)
async def list_client_options(db: DbSession, user: CurrentUser) -> ClientOptionsResponse:
    """Compact client list for dropdowns."""
    options = await ClientStorage(db).list_options()
    return ClientOptionsResponse(clients=[ClientOption(**option) for option in options])


@router.get("/{client_id}", response_model=ClientDetailResponse)
async def get_client(client_id: int, db: DbSession, audit: Audit) -> ClientDetailResponse:
    """Get client by ID."""
    client = await ClientStorage(db).get_by_id(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")

    audit.record(
        "viewed",
        "client",
        f"Viewed client: {client['name']}",
        resource_id=client_id,
        client_id=client_id,
    )
    return ClientDetailResponse(**client)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientCreate, db: DbSession, audit: Audit) -> ClientResponse:
    """Create a new client."""
    client = await ClientStorage(db).create(payload)
    audit.record(
        "created",
        "client",
        f"Created client: {client.name}",
        resource_id=client.id,
        client_id=client.id,
    )
    return _to_client_response(client)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    payload: ClientUpdate,
    db: DbSession,
    audit: Audit,
) -> ClientResponse:
    """Partially update client fields."""
    client = await ClientStorage(db).update(client_id, payload)
    audit.record(
        "updated",
        "client",
        f"Updated client: {client.name}",
        resource_id=client_id,
        client_id=client_id,
    )
    return _to_client_response(client)


@router.delete("/{client_id}", response_model=DeleteResponse)
async def delete_client(client_id: int, db: DbSession, audit: Audit) -> DeleteResponse:
    """Delete a client along with its tasks and activities."""
    client = await ClientStorage(db).delete(client_id)
    audit.record(
        "deleted",
        "client",
        f"Deleted client: {client.name}",
        resource_id=client_id,
    )
    return DeleteResponse(success=True, message="Client deleted successfully")
