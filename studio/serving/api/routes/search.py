"""
Global Search Endpoint

Keyword search across clients, sessions and invoices for the dashboard's
search box.
"""

import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
import structlog

from studio.database.connection import Database, get_database
from studio.database.queries import (
    client_search_query,
    invoice_search_query,
    session_search_query,
)
from studio.serving.api.schemas import CamelModel

router = APIRouter()
logger = structlog.get_logger(__name__)


class SearchHit(CamelModel):
    """One match, labelled for display"""
    id: str
    name: str
    type: str
    email: Optional[str] = None
    date: Optional[datetime.date] = None


class SearchResults(CamelModel):
    clients: List[SearchHit] = []
    sessions: List[SearchHit] = []
    invoices: List[SearchHit] = []
    total_results: int = 0


@router.get("", response_model=SearchResults)
async def search(
    q: Optional[str] = Query(None, description="Search term"),
    database: Database = Depends(get_database),
) -> SearchResults:
    """
    Search clients by name or email, sessions by type or location and
    invoices by number. Each list holds at most ten matches.
    """
    term = (q or "").strip()
    if not term:
        return SearchResults()

    async with database.session() as db:
        clients = (await db.execute(client_search_query(term))).mappings().all()
        sessions = (await db.execute(session_search_query(term))).mappings().all()
        invoices = (await db.execute(invoice_search_query(term))).mappings().all()

    results = SearchResults(
        clients=[
            SearchHit(id=row["id"], name=row["name"], type="Client", email=row["email"])
            for row in clients
        ],
        sessions=[
            SearchHit(id=row["id"], name=f"{row['session_type'] or 'Photo'} Session", type="Session", date=row["date"])
            for row in sessions
        ],
        invoices=[
            SearchHit(id=str(row["id"]), name=f"Invoice #{row['id']}", type="Invoice", date=row["date"])
            for row in invoices
        ],
    )
    results.total_results = len(results.clients) + len(results.sessions) + len(results.invoices)

    logger.info("Search completed", term=term, total_results=results.total_results)
    return results
