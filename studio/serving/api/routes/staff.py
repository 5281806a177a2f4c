"""
Staff API Endpoints

REST API for studio employees and their session assignments.
"""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import Field
from sqlalchemy import delete
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import Staff
from studio.database.queries import (
    staff_assignments_query,
    staff_detail_query,
    staff_list_query,
)
from studio.domain.fields import STAFF_FIELDS, map_fields
from studio.domain.listing import ListView
from studio.domain.status import subtract_months
from studio.domain.updates import build_update
from studio.serving.api.deps import ListQuery, get_now
from studio.serving.api.schemas import CamelModel, MutationResponse, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

RECENT_SESSION_MONTHS = 3

STAFF_LIST_VIEW = ListView(
    search_fields=("first_name", "last_name", "staff_email", "role", "phone"),
    page_size=10,
)


class StaffBase(CamelModel):
    """Staff fields shared by requests and responses"""
    staff_email: str = Field(min_length=3)
    first_name: str
    last_name: str
    role: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    pay_rate: OptionalMoney = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class StaffCreate(StaffBase):
    """Body of POST /api/staff"""
    pass


class StaffSummary(StaffBase):
    """Staff row in the list view"""
    clients_managed: int = 0
    sessions_assigned: int = 0


class StaffDetail(StaffSummary):
    """Single staff member with workload figures"""
    recent_sessions: int = 0
    upcoming_sessions: int = 0


class StaffAssignment(CamelModel):
    """Session a staff member is assigned to"""
    session_id: str
    staff_email: str
    role: Optional[str] = None
    session_type: Optional[str] = None
    session_date: date
    session_start_time: Optional[time] = None
    session_end_time: Optional[time] = None
    location: Optional[str] = None
    client_name: Optional[str] = None


class StaffCreated(MutationResponse):
    staff_email: str


@router.get("", response_model=List[StaffSummary])
async def list_staff(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
) -> List[StaffSummary]:
    """List all staff ordered by role and name."""
    async with database.session() as db:
        result = await db.execute(staff_list_query())
        rows = [dict(row._mapping) for row in result]

    rows = listing.apply(STAFF_LIST_VIEW, rows, response)
    return [StaffSummary.model_validate(row) for row in rows]


@router.get("/{email}", response_model=StaffDetail)
async def get_staff_member(
    email: str,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> StaffDetail:
    """
    Get one staff member.

    recentSessions counts assignments dated within the last three months
    (including upcoming ones); upcomingSessions counts those from today on.
    """
    today = now.date()
    recent_since = subtract_months(today, RECENT_SESSION_MONTHS)

    async with database.session() as db:
        row = (await db.execute(staff_detail_query(email, recent_since, today))).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return StaffDetail.model_validate(dict(row))


@router.post("", response_model=StaffCreated, status_code=201)
async def create_staff_member(
    payload: StaffCreate,
    database: Database = Depends(get_database),
) -> StaffCreated:
    """Add a staff member."""
    async with database.session() as db:
        db.add(Staff(**payload.model_dump()))

    logger.info("Staff member created", staff_email=payload.staff_email, role=payload.role)
    return StaffCreated(message="Staff member created successfully", staff_email=payload.staff_email)


@router.put("/{email}", response_model=MutationResponse)
async def update_staff_member(
    email: str,
    updates: Dict[str, Any] = Body(...),
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Partially update a staff member."""
    statement = build_update(STAFF_FIELDS, map_fields(STAFF_FIELDS, updates), email)

    async with database.session() as db:
        result = await db.execute(statement.to_text())
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Staff member not found")

    logger.info("Staff member updated", staff_email=email, columns=statement.columns)
    return MutationResponse(message="Staff member updated successfully")


@router.delete("/{email}", response_model=MutationResponse)
async def delete_staff_member(
    email: str,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Remove a staff member. Fails while clients or assignments still reference them."""
    async with database.session() as db:
        result = await db.execute(delete(Staff).where(Staff.staff_email == email))
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Staff member not found")

    logger.info("Staff member deleted", staff_email=email)
    return MutationResponse(message="Staff member deleted successfully")


@router.get("/{email}/assignments", response_model=List[StaffAssignment])
async def get_staff_assignments(
    email: str,
    database: Database = Depends(get_database),
) -> List[StaffAssignment]:
    """Sessions assigned to a staff member, newest first."""
    async with database.session() as db:
        result = await db.execute(staff_assignments_query(email))
        return [StaffAssignment.model_validate(dict(row)) for row in result.mappings()]
