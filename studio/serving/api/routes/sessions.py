"""
Sessions API Endpoints

REST API for photo sessions and the staff assigned to them.
"""

import time as clock
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from pydantic import model_validator
from sqlalchemy import delete, select, update
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import Client, PhotoSession, PhotoSessionAssignment
from studio.database.queries import (
    session_detail_query,
    session_list_query,
    session_range_query,
    session_staff_query,
)
from studio.domain.fields import SESSION_FIELDS, map_fields
from studio.domain.listing import ListView
from studio.domain.status import SessionStatus, session_status
from studio.domain.updates import build_update
from studio.serving.api.deps import ListQuery, get_now
from studio.serving.api.schemas import CamelModel, MutationResponse, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

SESSION_LIST_VIEW = ListView(
    search_fields=("session_type", "location", "client_name", "package_name"),
    page_size=12,
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class SessionBase(CamelModel):
    """Session fields shared by requests and responses"""
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


class SessionCreate(SessionBase):
    """Body of POST /api/sessions; the id is generated when omitted"""
    session_id: Optional[str] = None

    @model_validator(mode="after")
    def check_times(self) -> "SessionCreate":
        if (
            self.session_start_time is not None
            and self.session_end_time is not None
            and self.session_end_time < self.session_start_time
        ):
            raise ValueError("sessionEndTime must not be before sessionStartTime")
        return self


class SessionSummary(SessionBase):
    """Session row in the list view"""
    session_id: str
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    staff_assigned: int = 0
    status: SessionStatus


class SessionInRange(SessionBase):
    """Session row in the calendar range view"""
    session_id: str
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    staff_names: Optional[str] = None
    status: SessionStatus


class AssignedStaff(CamelModel):
    """Staff member working a session"""
    session_id: str
    staff_email: str
    role: Optional[str] = None
    staff_name: Optional[str] = None
    staff_main_role: Optional[str] = None


class SessionDetail(SessionBase):
    """Single session with client address and assigned staff"""
    session_id: str
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    status: SessionStatus
    assigned_staff: List[AssignedStaff] = []


class StaffAssignmentRequest(CamelModel):
    """Body of POST /api/sessions/{id}/assign-staff"""
    staff_email: str
    role: Optional[str] = "Photographer"


class SessionCreated(MutationResponse):
    session_id: str


def _with_status(row: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    row["status"] = session_status(
        row["session_date"], row["session_start_time"], row["session_end_time"], now
    )
    return row


def generate_session_id() -> str:
    """Ids handed out when the caller supplies none, e.g. ``SESS1760860800000``."""
    return f"SESS{int(clock.time() * 1000)}"


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[SessionSummary])
async def list_sessions(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[SessionSummary]:
    """List all sessions, newest date first."""
    async with database.session() as db:
        result = await db.execute(session_list_query())
        rows = [_with_status(dict(row._mapping), now) for row in result]

    rows = listing.apply(SESSION_LIST_VIEW, rows, response)
    return [SessionSummary.model_validate(row) for row in rows]


@router.get("/range", response_model=List[SessionInRange])
async def get_sessions_in_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[SessionInRange]:
    """Sessions between two dates inclusive, in calendar order."""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")

    async with database.session() as db:
        result = await db.execute(session_range_query(start_date, end_date))
        rows = [_with_status(dict(row._mapping), now) for row in result]

    return [SessionInRange.model_validate(row) for row in rows]


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: str,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> SessionDetail:
    """Get session details with its assigned staff."""
    async with database.session() as db:
        row = (await db.execute(session_detail_query(session_id))).mappings().first()
        if row is None:
            raise HTTPException(status_code=404, detail="Session not found")
        staff = (await db.execute(session_staff_query(session_id))).mappings().all()

    data = _with_status(dict(row), now)
    data["assigned_staff"] = [dict(member) for member in staff]
    return SessionDetail.model_validate(data)


@router.post("", response_model=SessionCreated, status_code=201)
async def create_session(
    payload: SessionCreate,
    database: Database = Depends(get_database),
) -> SessionCreated:
    """
    Book a session.

    The client's last-session date moves to the session date in the same
    transaction; nothing is written for an unknown client.
    """
    session_id = payload.session_id or generate_session_id()
    values = payload.model_dump(exclude={"session_id"})

    async with database.session() as db:
        result = await db.execute(
            update(Client)
            .where(Client.client_email == payload.client_email)
            .values(last_session_date=payload.session_date)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Client not found")

        db.add(PhotoSession(session_id=session_id, **values))

    logger.info("Session created", session_id=session_id, client_email=payload.client_email)
    return SessionCreated(message="Session created successfully", session_id=session_id)


@router.put("/{session_id}", response_model=MutationResponse)
async def update_session(
    session_id: str,
    updates: Dict[str, Any] = Body(...),
    database: Database = Depends(get_database),
) -> MutationResponse:
    """
    Partially update a session.

    The stored times are read under a row lock and merged with the changes,
    so a new end time is checked against the start time it will sit beside.
    """
    fields = map_fields(SESSION_FIELDS, updates)
    statement = build_update(SESSION_FIELDS, fields, session_id)
    changes = dict(fields)

    async with database.session() as db:
        current = (await db.execute(
            select(PhotoSession.session_start_time, PhotoSession.session_end_time)
            .where(PhotoSession.session_id == session_id)
            .with_for_update()
        )).first()
        if current is not None:
            start = changes.get("session_start_time", current.session_start_time)
            end = changes.get("session_end_time", current.session_end_time)
            times_valid = start is None or end is None or end >= start
            if times_valid:
                await db.execute(statement.to_text())

    if current is None:
        raise HTTPException(status_code=404, detail="Session not found")
    if not times_valid:
        raise HTTPException(status_code=400, detail="sessionEndTime must not be before sessionStartTime")

    logger.info("Session updated", session_id=session_id, columns=statement.columns)
    return MutationResponse(message="Session updated successfully")


@router.delete("/{session_id}", response_model=MutationResponse)
async def delete_session(
    session_id: str,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Delete a session together with its staff assignments."""
    async with database.session() as db:
        await db.execute(
            delete(PhotoSessionAssignment).where(PhotoSessionAssignment.session_id == session_id)
        )
        result = await db.execute(delete(PhotoSession).where(PhotoSession.session_id == session_id))
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Session not found")

    logger.info("Session deleted", session_id=session_id)
    return MutationResponse(message="Session deleted successfully")


@router.post("/{session_id}/assign-staff", response_model=MutationResponse, status_code=201)
async def assign_staff(
    session_id: str,
    payload: StaffAssignmentRequest,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Assign a staff member to a session in the given role."""
    async with database.session() as db:
        exists = await db.scalar(
            select(PhotoSession.session_id).where(PhotoSession.session_id == session_id)
        )
        if exists is None:
            raise HTTPException(status_code=404, detail="Session not found")

        db.add(PhotoSessionAssignment(
            session_id=session_id,
            staff_email=payload.staff_email,
            role=payload.role,
        ))

    logger.info("Staff assigned", session_id=session_id, staff_email=payload.staff_email)
    return MutationResponse(message="Staff assigned successfully")


@router.get("/{session_id}/assignments", response_model=List[AssignedStaff])
async def get_session_assignments(
    session_id: str,
    database: Database = Depends(get_database),
) -> List[AssignedStaff]:
    """Staff assigned to a session, ordered by role."""
    async with database.session() as db:
        result = await db.execute(session_staff_query(session_id))
        return [AssignedStaff.model_validate(dict(row)) for row in result.mappings()]


@router.delete("/{session_id}/assignments/{staff_email}", response_model=MutationResponse)
async def remove_assignment(
    session_id: str,
    staff_email: str,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Take a staff member off a session."""
    async with database.session() as db:
        result = await db.execute(
            delete(PhotoSessionAssignment).where(
                PhotoSessionAssignment.session_id == session_id,
                PhotoSessionAssignment.staff_email == staff_email,
            )
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Assignment not found")

    return MutationResponse(message="Assignment removed successfully")
