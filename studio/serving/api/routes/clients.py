"""
Clients API Endpoints

REST API for studio clients and their session history.
"""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import Field
from sqlalchemy import delete
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import Client
from studio.database.queries import (
    client_detail_query,
    client_list_query,
    client_sessions_query,
)
from studio.domain.fields import CLIENT_FIELDS, map_fields
from studio.domain.listing import ListView
from studio.domain.status import ClientStatus, SessionStatus, client_status, session_status
from studio.domain.updates import build_update
from studio.serving.api.deps import ListQuery, get_now
from studio.serving.api.schemas import CamelModel, MutationResponse, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

CLIENT_LIST_VIEW = ListView(
    search_fields=("first_name", "last_name", "client_email", "phone", "city"),
    page_size=10,
)


class ClientBase(CamelModel):
    """Client fields shared by requests and responses"""
    client_email: str = Field(min_length=3)
    first_name: str
    last_name: str
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    lead_source: Optional[str] = None
    managed_by_staff_email: Optional[str] = None
    marketing_lead_email: Optional[str] = None


class ClientCreate(ClientBase):
    """Body of POST /api/clients"""
    pass


class ClientSummary(ClientBase):
    """Client row in the list view"""
    last_session_date: Optional[date] = None
    manager_name: Optional[str] = None
    manager_role: Optional[str] = None
    lead_interests: Optional[str] = None
    lead_signup_date: Optional[date] = None
    session_count: int = 0
    status: ClientStatus


class ClientDetail(ClientBase):
    """Single client with its manager's contact details"""
    last_session_date: Optional[date] = None
    manager_name: Optional[str] = None
    manager_phone: Optional[str] = None
    manager_email: Optional[str] = None
    status: ClientStatus


class ClientSession(CamelModel):
    """Session row in a client's history"""
    session_id: str
    session_type: Optional[str] = None
    session_date: date
    session_start_time: Optional[time] = None
    session_end_time: Optional[time] = None
    location: Optional[str] = None
    package_name: Optional[str] = None
    session_fee: OptionalMoney = None
    deposit_paid: OptionalMoney = None
    notes: Optional[str] = None
    client_email: str
    staff_count: int = 0
    status: SessionStatus


class ClientCreated(MutationResponse):
    client_email: str


@router.get("", response_model=List[ClientSummary])
async def list_clients(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[ClientSummary]:
    """List all clients with manager and marketing-lead details."""
    logger.info("list_clients called", search=listing.search, page=listing.page)

    async with database.session() as db:
        result = await db.execute(client_list_query())
        rows = [dict(row._mapping) for row in result]

    for row in rows:
        row["status"] = client_status(row["last_session_date"], now)

    rows = listing.apply(CLIENT_LIST_VIEW, rows, response)
    logger.info("Clients retrieved successfully", count=len(rows))
    return [ClientSummary.model_validate(row) for row in rows]


@router.get("/{email}", response_model=ClientDetail)
async def get_client(
    email: str,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> ClientDetail:
    """Get one client by email."""
    async with database.session() as db:
        row = (await db.execute(client_detail_query(email))).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Client not found")

    data = dict(row)
    data["status"] = client_status(data["last_session_date"], now)
    return ClientDetail.model_validate(data)


@router.post("", response_model=ClientCreated, status_code=201)
async def create_client(
    payload: ClientCreate,
    database: Database = Depends(get_database),
) -> ClientCreated:
    """Create a client. New clients have no sessions, so they start as ``new``."""
    async with database.session() as db:
        db.add(Client(**payload.model_dump(), last_session_date=None))

    logger.info("Client created", client_email=payload.client_email)
    return ClientCreated(message="Client created successfully", client_email=payload.client_email)


@router.put("/{email}", response_model=MutationResponse)
async def update_client(
    email: str,
    updates: Dict[str, Any] = Body(...),
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Partially update a client. The email itself cannot change."""
    statement = build_update(CLIENT_FIELDS, map_fields(CLIENT_FIELDS, updates), email)

    async with database.session() as db:
        result = await db.execute(statement.to_text())
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Client not found")

    logger.info("Client updated", client_email=email, columns=statement.columns)
    return MutationResponse(message="Client updated successfully")


@router.delete("/{email}", response_model=MutationResponse)
async def delete_client(
    email: str,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Delete a client. Fails while sessions or invoices still reference it."""
    async with database.session() as db:
        result = await db.execute(delete(Client).where(Client.client_email == email))
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Client not found")

    logger.info("Client deleted", client_email=email)
    return MutationResponse(message="Client deleted successfully")


@router.get("/{email}/sessions", response_model=List[ClientSession])
async def get_client_sessions(
    email: str,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[ClientSession]:
    """Sessions booked for a client, newest first."""
    async with database.session() as db:
        result = await db.execute(client_sessions_query(email))
        rows = [dict(row._mapping) for row in result]

    for row in rows:
        row["status"] = session_status(
            row["session_date"], row["session_start_time"], row["session_end_time"], now
        )
    return [ClientSession.model_validate(row) for row in rows]
