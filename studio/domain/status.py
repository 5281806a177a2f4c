"""
Status Derivation Rules

Pure functions mapping stored fields plus the current time to a small,
fixed set of labels. Nothing here is persisted; every read recomputes the
label, so the passage of time changes what is displayed without any write.
"""

import calendar
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class InvoiceStatus(str, Enum):
    """Payment state of an invoice"""
    PAID = "paid"
    OVERDUE = "overdue"
    PENDING = "pending"


class ClientStatus(str, Enum):
    """Engagement state of a client"""
    NEW = "new"
    ACTIVE = "active"
    INACTIVE = "inactive"


class SessionStatus(str, Enum):
    """Timeline state of a photo session"""
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    UPCOMING = "upcoming"


class StockStatus(str, Enum):
    """Inventory-alert level used by the product catalogue"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReorderStatus(str, Enum):
    """Reorder flag used by the low-stock report"""
    OUT_OF_STOCK = "out-of-stock"
    LOW_STOCK = "low-stock"
    IN_STOCK = "in-stock"


class LeadStatus(str, Enum):
    """Whether a marketing lead has become a client"""
    CONVERTED = "converted"
    LEAD = "lead"


CLIENT_INACTIVE_AFTER_MONTHS = 6

# Catalogue thresholds
STOCK_LOW_MAX = 5
STOCK_MEDIUM_MAX = 20

# Reorder report threshold; deliberately separate from the catalogue levels
REORDER_THRESHOLD = 10


def subtract_months(day: date, months: int) -> date:
    """Same day-of-month ``months`` earlier, clamped to the shorter month's end."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month_zero = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month_zero + 1)[1]
    return date(year, month_zero + 1, min(day.day, last_day))


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def invoice_status(
    balance_due: Optional[Decimal],
    balance_due_date: Optional[date],
    now: datetime,
) -> InvoiceStatus:
    """
    Paid when nothing is owed; overdue once the due date's midnight has
    passed with a positive balance outstanding; pending otherwise.
    """
    if balance_due is not None and balance_due == 0:
        return InvoiceStatus.PAID
    owing = balance_due is not None and balance_due > 0
    if owing and balance_due_date is not None and datetime.combine(_as_date(balance_due_date), time.min) < now:
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.PENDING


def client_status(last_session_date: Optional[date], now: datetime) -> ClientStatus:
    """
    New until the first session is booked, inactive when the last session
    is more than six months old. A last session exactly six months back
    is still active.
    """
    if last_session_date is None:
        return ClientStatus.NEW
    cutoff = subtract_months(_as_date(now), CLIENT_INACTIVE_AFTER_MONTHS)
    if _as_date(last_session_date) < cutoff:
        return ClientStatus.INACTIVE
    return ClientStatus.ACTIVE


def session_status(
    session_date: date,
    start_time: Optional[time],
    end_time: Optional[time],
    now: datetime,
) -> SessionStatus:
    """
    Completed once the end has passed, upcoming before the start, in
    progress in between. A missing start means midnight; a missing end
    means the session ends when it starts.
    """
    day = _as_date(session_date)
    start = datetime.combine(day, start_time or time.min)
    end = datetime.combine(day, end_time) if end_time is not None else start

    if end < now:
        return SessionStatus.COMPLETED
    if start > now:
        return SessionStatus.UPCOMING
    return SessionStatus.IN_PROGRESS


def stock_status(stock_level: Optional[int]) -> StockStatus:
    stock = stock_level or 0
    if stock <= STOCK_LOW_MAX:
        return StockStatus.LOW
    if stock <= STOCK_MEDIUM_MAX:
        return StockStatus.MEDIUM
    return StockStatus.HIGH


def reorder_status(stock_level: Optional[int]) -> ReorderStatus:
    stock = stock_level or 0
    if stock <= 0:
        return ReorderStatus.OUT_OF_STOCK
    if stock <= REORDER_THRESHOLD:
        return ReorderStatus.LOW_STOCK
    return ReorderStatus.IN_STOCK


def lead_status(converted_client_email: Optional[str]) -> LeadStatus:
    """Converted when some client names this lead as its marketing source."""
    if converted_client_email:
        return LeadStatus.CONVERTED
    return LeadStatus.LEAD
