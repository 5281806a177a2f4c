"""
Aggregate Query Composer

Primary entity selects enriched with correlated scalar subqueries (counts,
sums and joined names evaluated per row), so a list endpoint costs one
round trip however many rows it returns. Sort order is fixed per query and
there is no pagination at this layer.

Every query selects flat columns so a row's mapping can be handed to a
response model as-is.
"""

from datetime import date

from sqlalchemy import Select, String, cast, func, select
from sqlalchemy.sql.elements import ColumnElement

from studio.database.models import (
    Client,
    Invoice,
    InvoiceLineItem,
    MarketingLead,
    PhotoSession,
    PhotoSessionAssignment,
    Product,
    Staff,
)


# =============================================================================
# BUILDING BLOCKS
# =============================================================================

def full_name(entity) -> ColumnElement:
    """``first_name || ' ' || last_name`` for Client or Staff."""
    return entity.first_name + " " + entity.last_name


def count_of(entity, *criteria) -> ColumnElement:
    """Per-row count of ``entity`` rows matching ``criteria``."""
    return (
        select(func.count())
        .select_from(entity)
        .where(*criteria)
        .scalar_subquery()
    )


def sum_of(column, *criteria) -> ColumnElement:
    """Per-row sum of ``column``; zero when nothing matches."""
    return (
        select(func.coalesce(func.sum(column), 0))
        .where(*criteria)
        .scalar_subquery()
    )


def staff_names_for_session() -> ColumnElement:
    """Comma-separated names of the staff assigned to the enclosing session row."""
    return (
        select(func.aggregate_strings(full_name(Staff), ", "))
        .select_from(PhotoSessionAssignment)
        .join(Staff, PhotoSessionAssignment.staff_email == Staff.staff_email)
        .where(PhotoSessionAssignment.session_id == PhotoSession.session_id)
        .scalar_subquery()
    )


def _assigned_staff_count() -> ColumnElement:
    return count_of(
        PhotoSessionAssignment,
        PhotoSessionAssignment.session_id == PhotoSession.session_id,
    )


# =============================================================================
# CLIENTS
# =============================================================================

def client_list_query() -> Select:
    return (
        select(
            *Client.__table__.columns,
            full_name(Staff).label("manager_name"),
            Staff.role.label("manager_role"),
            MarketingLead.interests.label("lead_interests"),
            MarketingLead.date_signed_up.label("lead_signup_date"),
            count_of(PhotoSession, PhotoSession.client_email == Client.client_email).label("session_count"),
        )
        .outerjoin(Staff, Client.managed_by_staff_email == Staff.staff_email)
        .outerjoin(MarketingLead, Client.marketing_lead_email == MarketingLead.email)
        .order_by(Client.last_name, Client.first_name)
    )


def client_detail_query(client_email: str) -> Select:
    return (
        select(
            *Client.__table__.columns,
            full_name(Staff).label("manager_name"),
            Staff.phone.label("manager_phone"),
            Staff.staff_email.label("manager_email"),
        )
        .outerjoin(Staff, Client.managed_by_staff_email == Staff.staff_email)
        .where(Client.client_email == client_email)
    )


def client_sessions_query(client_email: str) -> Select:
    return (
        select(
            *PhotoSession.__table__.columns,
            _assigned_staff_count().label("staff_count"),
        )
        .where(PhotoSession.client_email == client_email)
        .order_by(PhotoSession.session_date.desc())
    )


# =============================================================================
# SESSIONS
# =============================================================================

def session_list_query() -> Select:
    return (
        select(
            *PhotoSession.__table__.columns,
            full_name(Client).label("client_name"),
            Client.phone.label("client_phone"),
            _assigned_staff_count().label("staff_assigned"),
        )
        .join(Client, PhotoSession.client_email == Client.client_email)
        .order_by(PhotoSession.session_date.desc(), PhotoSession.session_start_time)
    )


def session_range_query(start_date: date, end_date: date) -> Select:
    return (
        select(
            *PhotoSession.__table__.columns,
            full_name(Client).label("client_name"),
            Client.phone.label("client_phone"),
            staff_names_for_session().label("staff_names"),
        )
        .join(Client, PhotoSession.client_email == Client.client_email)
        .where(PhotoSession.session_date.between(start_date, end_date))
        .order_by(PhotoSession.session_date, PhotoSession.session_start_time)
    )


def session_detail_query(session_id: str) -> Select:
    return (
        select(
            *PhotoSession.__table__.columns,
            full_name(Client).label("client_name"),
            Client.phone.label("client_phone"),
            Client.street,
            Client.city,
            Client.state,
            Client.zip,
        )
        .join(Client, PhotoSession.client_email == Client.client_email)
        .where(PhotoSession.session_id == session_id)
    )


def session_staff_query(session_id: str) -> Select:
    return (
        select(
            *PhotoSessionAssignment.__table__.columns,
            full_name(Staff).label("staff_name"),
            Staff.role.label("staff_main_role"),
        )
        .join(Staff, PhotoSessionAssignment.staff_email == Staff.staff_email)
        .where(PhotoSessionAssignment.session_id == session_id)
        .order_by(PhotoSessionAssignment.role)
    )


# =============================================================================
# INVOICES
# =============================================================================

def invoice_list_query() -> Select:
    return (
        select(
            *Invoice.__table__.columns,
            full_name(Client).label("client_name"),
            Client.phone.label("client_phone"),
            count_of(
                InvoiceLineItem,
                InvoiceLineItem.invoice_number == Invoice.invoice_number,
            ).label("line_item_count"),
        )
        .join(Client, Invoice.client_email == Client.client_email)
        .order_by(Invoice.invoice_date.desc())
    )


def invoice_detail_query(invoice_number: int) -> Select:
    return (
        select(
            *Invoice.__table__.columns,
            full_name(Client).label("client_name"),
            Client.phone.label("client_phone"),
            Client.street,
            Client.city,
            Client.state,
            Client.zip,
        )
        .join(Client, Invoice.client_email == Client.client_email)
        .where(Invoice.invoice_number == invoice_number)
    )


def invoice_line_items_query(invoice_number: int) -> Select:
    return (
        select(
            *InvoiceLineItem.__table__.columns,
            Product.product_name,
            Product.sale_price,
            (InvoiceLineItem.quantity * Product.sale_price).label("line_total"),
        )
        .join(Product, InvoiceLineItem.product_id == Product.product_id)
        .where(InvoiceLineItem.invoice_number == invoice_number)
        .order_by(Product.product_name)
    )


# =============================================================================
# STAFF
# =============================================================================

def _clients_managed() -> ColumnElement:
    return count_of(Client, Client.managed_by_staff_email == Staff.staff_email)


def _sessions_assigned() -> ColumnElement:
    return count_of(
        PhotoSessionAssignment,
        PhotoSessionAssignment.staff_email == Staff.staff_email,
    )


def _sessions_on_or_after(day: date) -> ColumnElement:
    return (
        select(func.count())
        .select_from(PhotoSessionAssignment)
        .join(PhotoSession, PhotoSessionAssignment.session_id == PhotoSession.session_id)
        .where(
            PhotoSessionAssignment.staff_email == Staff.staff_email,
            PhotoSession.session_date >= day,
        )
        .scalar_subquery()
    )


def staff_list_query() -> Select:
    return (
        select(
            *Staff.__table__.columns,
            _clients_managed().label("clients_managed"),
            _sessions_assigned().label("sessions_assigned"),
        )
        .order_by(Staff.role, Staff.last_name, Staff.first_name)
    )


def staff_detail_query(staff_email: str, recent_since: date, today: date) -> Select:
    return (
        select(
            *Staff.__table__.columns,
            _clients_managed().label("clients_managed"),
            _sessions_assigned().label("sessions_assigned"),
            _sessions_on_or_after(recent_since).label("recent_sessions"),
            _sessions_on_or_after(today).label("upcoming_sessions"),
        )
        .where(Staff.staff_email == staff_email)
    )


def staff_performance_query(recent_since: date) -> Select:
    clients_managed = _clients_managed().label("clients_managed")
    return (
        select(
            Staff.staff_email,
            full_name(Staff).label("staff_name"),
            Staff.role,
            clients_managed,
            _sessions_assigned().label("sessions_assigned"),
            _sessions_on_or_after(recent_since).label("recent_sessions"),
        )
        .order_by(clients_managed.desc(), Staff.staff_email)
    )


def staff_assignments_query(staff_email: str) -> Select:
    return (
        select(
            *PhotoSessionAssignment.__table__.columns,
            PhotoSession.session_type,
            PhotoSession.session_date,
            PhotoSession.session_start_time,
            PhotoSession.session_end_time,
            PhotoSession.location,
            full_name(Client).label("client_name"),
        )
        .join(PhotoSession, PhotoSessionAssignment.session_id == PhotoSession.session_id)
        .join(Client, PhotoSession.client_email == Client.client_email)
        .where(PhotoSessionAssignment.staff_email == staff_email)
        .order_by(PhotoSession.session_date.desc())
    )


# =============================================================================
# PRODUCTS
# =============================================================================

def _units_sold() -> ColumnElement:
    return sum_of(InvoiceLineItem.quantity, InvoiceLineItem.product_id == Product.product_id)


def product_list_query() -> Select:
    return (
        select(
            *Product.__table__.columns,
            _units_sold().label("total_sold"),
        )
        .order_by(Product.product_name)
    )


def product_detail_query(product_id: str) -> Select:
    times_sold = (
        select(func.count(func.distinct(InvoiceLineItem.invoice_number)))
        .where(InvoiceLineItem.product_id == Product.product_id)
        .scalar_subquery()
    )
    return (
        select(
            *Product.__table__.columns,
            times_sold.label("times_sold"),
            _units_sold().label("units_sold"),
        )
        .where(Product.product_id == product_id)
    )


def low_stock_query(threshold: int) -> Select:
    return (
        select(*Product.__table__.columns)
        .where(Product.stock_level <= threshold)
        .order_by(Product.stock_level, Product.product_name)
    )


# =============================================================================
# MARKETING LEADS
# =============================================================================

def _converting_client() -> ColumnElement:
    return (
        select(Client.client_email)
        .where(Client.marketing_lead_email == MarketingLead.email)
        .order_by(Client.client_email)
        .limit(1)
        .scalar_subquery()
    )


def marketing_lead_list_query() -> Select:
    return (
        select(
            *MarketingLead.__table__.columns,
            _converting_client().label("converted_to_client"),
        )
        .order_by(MarketingLead.date_signed_up.desc())
    )


def marketing_lead_detail_query(email: str) -> Select:
    return (
        select(
            *MarketingLead.__table__.columns,
            _converting_client().label("converted_to_client"),
        )
        .where(MarketingLead.email == email)
    )


# =============================================================================
# ANALYTICS
# =============================================================================

def dashboard_query(today: date, month_start: date, next_month_start: date) -> Select:
    """Headline figures in one row."""
    return select(
        count_of(Client).label("total_clients"),
        count_of(PhotoSession, PhotoSession.session_date >= today).label("upcoming_sessions"),
        sum_of(
            Invoice.payment_received,
            Invoice.invoice_date >= month_start,
            Invoice.invoice_date < next_month_start,
        ).label("monthly_revenue"),
        sum_of(Invoice.balance_due, Invoice.balance_due > 0).label("outstanding_balance"),
        count_of(Staff).label("total_staff"),
        count_of(Product, Product.stock_level > 0).label("active_products"),
    )


def invoices_since_query(since: date) -> Select:
    """Invoice dates and payments for month bucketing, which happens in Python."""
    return (
        select(Invoice.invoice_date, Invoice.payment_received)
        .where(Invoice.invoice_date >= since)
        .order_by(Invoice.invoice_date)
    )


def session_types_query(since: date) -> Select:
    session_count = func.count().label("session_count")
    return (
        select(
            PhotoSession.session_type,
            session_count,
            func.avg(PhotoSession.session_fee).label("avg_fee"),
            func.coalesce(func.sum(PhotoSession.session_fee), 0).label("total_revenue"),
        )
        .where(PhotoSession.session_date >= since)
        .group_by(PhotoSession.session_type)
        .order_by(session_count.desc(), PhotoSession.session_type)
    )


def marketing_conversion_query() -> Select:
    return (
        select(
            MarketingLead.interests,
            func.count(func.distinct(MarketingLead.email)).label("total_leads"),
            func.count(func.distinct(Client.client_email)).label("converted_clients"),
        )
        .outerjoin(Client, Client.marketing_lead_email == MarketingLead.email)
        .group_by(MarketingLead.interests)
    )


# =============================================================================
# SEARCH
# =============================================================================

SEARCH_LIMIT = 10


def contains_pattern(term: str) -> str:
    """LIKE pattern matching ``term`` literally anywhere; pair with ``escape="\\"``."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def client_search_query(term: str) -> Select:
    pattern = contains_pattern(term.lower())
    return (
        select(
            Client.client_email.label("id"),
            full_name(Client).label("name"),
            Client.client_email.label("email"),
        )
        .where(
            func.lower(Client.first_name).like(pattern, escape="\\")
            | func.lower(Client.last_name).like(pattern, escape="\\")
            | func.lower(Client.client_email).like(pattern, escape="\\")
        )
        .order_by(Client.last_name, Client.first_name)
        .limit(SEARCH_LIMIT)
    )


def session_search_query(term: str) -> Select:
    pattern = contains_pattern(term.lower())
    return (
        select(
            PhotoSession.session_id.label("id"),
            PhotoSession.session_type,
            PhotoSession.session_date.label("date"),
        )
        .where(
            func.lower(PhotoSession.session_type).like(pattern, escape="\\")
            | func.lower(PhotoSession.location).like(pattern, escape="\\")
        )
        .order_by(PhotoSession.session_date.desc())
        .limit(SEARCH_LIMIT)
    )


def invoice_search_query(term: str) -> Select:
    return (
        select(
            Invoice.invoice_number.label("id"),
            Invoice.invoice_date.label("date"),
        )
        .where(cast(Invoice.invoice_number, String).like(contains_pattern(term), escape="\\"))
        .order_by(Invoice.invoice_date.desc())
        .limit(SEARCH_LIMIT)
    )
