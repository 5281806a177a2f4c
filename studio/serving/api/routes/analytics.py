"""
Analytics API Endpoints

Dashboard figures and the report views built on the aggregate queries.
"""

from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
import structlog

from studio.database.connection import Database, get_database
from studio.database.queries import (
    dashboard_query,
    invoices_since_query,
    marketing_conversion_query,
    session_types_query,
    staff_performance_query,
)
from studio.domain.status import subtract_months
from studio.serving.api.deps import get_now
from studio.serving.api.schemas import CamelModel, Money, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

REVENUE_TREND_MONTHS = 12
SESSION_TYPE_MONTHS = 6
RECENT_SESSION_MONTHS = 3


class DashboardStats(CamelModel):
    """Headline figures for the dashboard cards"""
    total_clients: int
    upcoming_sessions: int
    monthly_revenue: Money
    outstanding_balance: Money
    total_staff: int
    active_products: int


class MonthlyRevenue(CamelModel):
    """Payments received on invoices dated in one month"""
    month: str
    revenue: Money
    invoice_count: int


class SessionTypeStats(CamelModel):
    session_type: Optional[str] = None
    session_count: int
    avg_fee: OptionalMoney = None
    total_revenue: Money


class MarketingConversion(CamelModel):
    """Lead-to-client conversion for one interest group"""
    interests: Optional[str] = None
    total_leads: int
    converted_clients: int
    conversion_rate: Optional[float] = None


class StaffPerformance(CamelModel):
    staff_email: str
    staff_name: str
    role: Optional[str] = None
    clients_managed: int
    sessions_assigned: int
    recent_sessions: int


def _month_bounds(today: date):
    start = today.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> DashboardStats:
    """
    Dashboard statistics.

    Monthly revenue is the payment received on invoices dated in the
    current calendar month.
    """
    today = now.date()
    month_start, next_month_start = _month_bounds(today)

    async with database.session() as db:
        row = (await db.execute(dashboard_query(today, month_start, next_month_start))).mappings().one()

    logger.debug("Dashboard statistics computed", total_clients=row["total_clients"])
    return DashboardStats.model_validate(dict(row))


@router.get("/revenue-trends", response_model=List[MonthlyRevenue])
async def get_revenue_trends(
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[MonthlyRevenue]:
    """Revenue per ``YYYY-MM`` for the last twelve months, oldest first."""
    since = subtract_months(now.date(), REVENUE_TREND_MONTHS)

    async with database.session() as db:
        result = await db.execute(invoices_since_query(since))
        invoices = result.all()

    months: "OrderedDict[str, MonthlyRevenue]" = OrderedDict()
    for invoice_date, payment_received in invoices:
        key = invoice_date.strftime("%Y-%m")
        bucket = months.setdefault(key, MonthlyRevenue(month=key, revenue=Decimal("0"), invoice_count=0))
        bucket.revenue += _as_decimal(payment_received)
        bucket.invoice_count += 1

    return list(months.values())


@router.get("/session-types", response_model=List[SessionTypeStats])
async def get_session_types(
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[SessionTypeStats]:
    """Session counts and fees per type over the last six months."""
    since = subtract_months(now.date(), SESSION_TYPE_MONTHS)

    async with database.session() as db:
        result = await db.execute(session_types_query(since))
        return [SessionTypeStats.model_validate(dict(row)) for row in result.mappings()]


@router.get("/marketing-conversion", response_model=List[MarketingConversion])
async def get_marketing_conversion(
    database: Database = Depends(get_database),
) -> List[MarketingConversion]:
    """Conversion rate per interest group, best converting first."""
    async with database.session() as db:
        result = await db.execute(marketing_conversion_query())
        rows = [dict(row) for row in result.mappings()]

    for row in rows:
        total = row["total_leads"]
        row["conversion_rate"] = round(row["converted_clients"] * 100.0 / total, 2) if total else None

    rows.sort(key=lambda row: row["conversion_rate"] if row["conversion_rate"] is not None else -1, reverse=True)
    return [MarketingConversion.model_validate(row) for row in rows]


@router.get("/staff-performance", response_model=List[StaffPerformance])
async def get_staff_performance(
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[StaffPerformance]:
    """Workload per staff member; recent means the last three months."""
    recent_since = subtract_months(now.date(), RECENT_SESSION_MONTHS)

    async with database.session() as db:
        result = await db.execute(staff_performance_query(recent_since))
        return [StaffPerformance.model_validate(dict(row)) for row in result.mappings()]
