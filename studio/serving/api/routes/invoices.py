"""
Invoices API Endpoints

REST API for invoices, their line items and recorded payments.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import Field, model_validator
from sqlalchemy import delete, select, update
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import Invoice, InvoiceLineItem
from studio.database.queries import (
    invoice_detail_query,
    invoice_line_items_query,
    invoice_list_query,
)
from studio.domain.fields import INVOICE_FIELDS, map_fields
from studio.domain.listing import ListView
from studio.domain.status import InvoiceStatus, invoice_status
from studio.domain.updates import build_update
from studio.serving.api.deps import ListQuery, get_now
from studio.serving.api.schemas import CamelModel, Money, MutationResponse, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

INVOICE_LIST_VIEW = ListView(
    search_fields=("invoice_number", "client_name", "client_email", "description"),
    page_size=10,
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class LineItemRequest(CamelModel):
    """One product line on a new invoice"""
    product_id: str
    quantity: int = Field(default=1, ge=1)


class InvoiceBase(CamelModel):
    """Invoice fields shared by requests and responses"""
    invoice_number: int
    invoice_date: date
    description: Optional[str] = None
    subtotal: Money = Decimal("0")
    tax: Money = Decimal("0")
    total_due: Money = Decimal("0")
    payment_received: Money = Decimal("0")
    balance_due_date: Optional[date] = None
    client_email: str


class InvoiceCreate(InvoiceBase):
    """
    Body of POST /api/invoices.

    balanceDue defaults to totalDue minus paymentReceived.
    """
    balance_due: OptionalMoney = None
    line_items: List[LineItemRequest] = []

    @model_validator(mode="after")
    def fill_balance(self) -> "InvoiceCreate":
        if self.balance_due is None:
            self.balance_due = self.total_due - self.payment_received
        product_ids = [item.product_id for item in self.line_items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("lineItems must name each product once")
        return self


class InvoiceSummary(InvoiceBase):
    """Invoice row in the list view"""
    balance_due: Money
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    line_item_count: int = 0
    payment_status: InvoiceStatus


class LineItem(CamelModel):
    """Priced line item of a stored invoice"""
    invoice_number: int
    product_id: str
    quantity: int
    product_name: Optional[str] = None
    sale_price: OptionalMoney = None
    line_total: OptionalMoney = None


class InvoiceDetail(InvoiceBase):
    """Single invoice with its client's address"""
    balance_due: Money
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    payment_status: InvoiceStatus


class InvoiceWithLineItems(InvoiceDetail):
    """Invoice, its priced line items and their total"""
    line_items: List[LineItem] = []
    line_items_total: Money = Decimal("0")


class PaymentRequest(CamelModel):
    """Body of PUT /api/invoices/{number}/payment"""
    payment_received: Money = Field(gt=0)


class InvoiceCreated(MutationResponse):
    invoice_number: int


def _with_status(row: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    row["payment_status"] = invoice_status(row["balance_due"], row["balance_due_date"], now)
    return row


async def _load_invoice(db, invoice_number: int, now: datetime) -> Dict[str, Any]:
    row = (await db.execute(invoice_detail_query(invoice_number))).mappings().first()
    if row is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return _with_status(dict(row), now)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[InvoiceSummary])
async def list_invoices(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> List[InvoiceSummary]:
    """List all invoices, newest first, with their payment status."""
    async with database.session() as db:
        result = await db.execute(invoice_list_query())
        rows = [_with_status(dict(row._mapping), now) for row in result]

    rows = listing.apply(INVOICE_LIST_VIEW, rows, response)
    return [InvoiceSummary.model_validate(row) for row in rows]


@router.get("/{invoice_number}", response_model=InvoiceDetail)
async def get_invoice(
    invoice_number: int,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> InvoiceDetail:
    """Get one invoice header."""
    async with database.session() as db:
        data = await _load_invoice(db, invoice_number, now)
    return InvoiceDetail.model_validate(data)


@router.get("/{invoice_number}/details", response_model=InvoiceWithLineItems)
async def get_invoice_details(
    invoice_number: int,
    database: Database = Depends(get_database),
    now: datetime = Depends(get_now),
) -> InvoiceWithLineItems:
    """Get an invoice with its line items priced at the current sale price."""
    async with database.session() as db:
        data = await _load_invoice(db, invoice_number, now)
        result = await db.execute(invoice_line_items_query(invoice_number))
        line_items = [dict(row) for row in result.mappings()]

    data["line_items"] = line_items
    data["line_items_total"] = sum(
        (Decimal(item["line_total"] or 0) for item in line_items), Decimal("0")
    )
    return InvoiceWithLineItems.model_validate(data)


@router.post("", response_model=InvoiceCreated, status_code=201)
async def create_invoice(
    payload: InvoiceCreate,
    database: Database = Depends(get_database),
) -> InvoiceCreated:
    """Create an invoice and its line items in one transaction."""
    values = payload.model_dump(exclude={"line_items"})

    async with database.session() as db:
        db.add(Invoice(**values))
        await db.flush()
        db.add_all(
            InvoiceLineItem(
                invoice_number=payload.invoice_number,
                product_id=item.product_id,
                quantity=item.quantity,
            )
            for item in payload.line_items
        )

    logger.info(
        "Invoice created",
        invoice_number=payload.invoice_number,
        line_items=len(payload.line_items),
    )
    return InvoiceCreated(message="Invoice created successfully", invoice_number=payload.invoice_number)


@router.put("/{invoice_number}", response_model=MutationResponse)
async def update_invoice(
    invoice_number: int,
    updates: Dict[str, Any] = Body(...),
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Partially update an invoice header. Balance is not recomputed here."""
    statement = build_update(INVOICE_FIELDS, map_fields(INVOICE_FIELDS, updates), invoice_number)

    async with database.session() as db:
        result = await db.execute(statement.to_text())
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Invoice not found")

    logger.info("Invoice updated", invoice_number=invoice_number, columns=statement.columns)
    return MutationResponse(message="Invoice updated successfully")


@router.put("/{invoice_number}/payment", response_model=MutationResponse)
async def record_payment(
    invoice_number: int,
    payload: PaymentRequest,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """
    Add a payment to the amount received and recompute the balance.

    A payment larger than the balance due is refused in the UPDATE itself,
    so the balance never goes below zero.
    """
    received = Invoice.payment_received + payload.payment_received

    async with database.session() as db:
        result = await db.execute(
            update(Invoice)
            .where(
                Invoice.invoice_number == invoice_number,
                Invoice.balance_due >= payload.payment_received,
            )
            .values(payment_received=received, balance_due=Invoice.total_due - received)
            .execution_options(synchronize_session=False)
        )
        applied = result.rowcount > 0
        if not applied:
            exists = await db.scalar(
                select(Invoice.invoice_number).where(Invoice.invoice_number == invoice_number)
            )

    if not applied:
        if exists is None:
            raise HTTPException(status_code=404, detail="Invoice not found")
        raise HTTPException(status_code=400, detail="Payment exceeds balance due")

    logger.info("Payment recorded", invoice_number=invoice_number, amount=str(payload.payment_received))
    return MutationResponse(message="Payment recorded successfully")


@router.delete("/{invoice_number}", response_model=MutationResponse)
async def delete_invoice(
    invoice_number: int,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Delete an invoice and its line items."""
    async with database.session() as db:
        await db.execute(
            delete(InvoiceLineItem).where(InvoiceLineItem.invoice_number == invoice_number)
        )
        result = await db.execute(delete(Invoice).where(Invoice.invoice_number == invoice_number))
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Invoice not found")

    logger.info("Invoice deleted", invoice_number=invoice_number)
    return MutationResponse(message="Invoice deleted successfully")
