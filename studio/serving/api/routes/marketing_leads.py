"""
Marketing Leads API Endpoints
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import Field
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import MarketingLead
from studio.database.queries import marketing_lead_detail_query, marketing_lead_list_query
from studio.domain.listing import ListView
from studio.domain.status import LeadStatus, lead_status
from studio.serving.api.deps import ListQuery
from studio.serving.api.schemas import CamelModel, MutationResponse

router = APIRouter()
logger = structlog.get_logger(__name__)

LEAD_LIST_VIEW = ListView(search_fields=("email", "interests"), page_size=10)


class MarketingLeadBase(CamelModel):
    email: str = Field(min_length=3)
    interests: Optional[str] = None
    date_signed_up: Optional[date] = None


class MarketingLeadCreate(MarketingLeadBase):
    """Body of POST /api/marketing-leads; the sign-up date defaults to today"""
    pass


class MarketingLeadSummary(MarketingLeadBase):
    converted_to_client: Optional[str] = None
    status: LeadStatus


class MarketingLeadCreated(MutationResponse):
    email: str


def _with_status(row: dict) -> dict:
    row["status"] = lead_status(row["converted_to_client"])
    return row


@router.get("", response_model=List[MarketingLeadSummary])
async def list_marketing_leads(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
) -> List[MarketingLeadSummary]:
    """List leads, most recent sign-up first, with conversion status."""
    async with database.session() as db:
        result = await db.execute(marketing_lead_list_query())
        rows = [_with_status(dict(row._mapping)) for row in result]

    rows = listing.apply(LEAD_LIST_VIEW, rows, response)
    return [MarketingLeadSummary.model_validate(row) for row in rows]


@router.get("/{email}", response_model=MarketingLeadSummary)
async def get_marketing_lead(
    email: str,
    database: Database = Depends(get_database),
) -> MarketingLeadSummary:
    async with database.session() as db:
        row = (await db.execute(marketing_lead_detail_query(email))).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Marketing lead not found")
    return MarketingLeadSummary.model_validate(_with_status(dict(row)))


@router.post("", response_model=MarketingLeadCreated, status_code=201)
async def create_marketing_lead(
    payload: MarketingLeadCreate,
    database: Database = Depends(get_database),
) -> MarketingLeadCreated:
    """Record a new sign-up."""
    async with database.session() as db:
        db.add(MarketingLead(
            email=payload.email,
            interests=payload.interests,
            date_signed_up=payload.date_signed_up or date.today(),
        ))

    logger.info("Marketing lead created", email=payload.email)
    return MarketingLeadCreated(message="Marketing lead created successfully", email=payload.email)
