"""
Database Models - Studio Schema

Declarative models for the studio's records:

- Client: customers of the studio, keyed by email
- Staff: photographers, assistants and office staff, keyed by email
- PhotoSession / PhotoSessionAssignment: booked shoots and who works them
- Invoice / InvoiceLineItem: billing documents and the products sold on them
- Product: prints, albums and frames sold by SKU
- MarketingLead: newsletter and campaign sign-ups that may become clients

Derived statuses (overdue invoices, inactive clients, low stock) are never
stored here; see studio.domain.status.
"""

from datetime import date, time
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


Money = Numeric(10, 2)


class Staff(Base):
    """Studio employee; manages clients and is assigned to sessions."""
    __tablename__ = "staff"

    staff_email: Mapped[str] = mapped_column(String(100), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(50))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    hire_date: Mapped[Optional[date]] = mapped_column(Date)
    pay_rate: Mapped[Optional[Decimal]] = mapped_column(Money)
    street: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(50))
    state: Mapped[Optional[str]] = mapped_column(String(20))
    zip: Mapped[Optional[str]] = mapped_column(String(10))


class MarketingLead(Base):
    """Prospect captured by a campaign or sign-up form."""
    __tablename__ = "marketing_lead"

    email: Mapped[str] = mapped_column(String(100), primary_key=True)
    interests: Mapped[Optional[str]] = mapped_column(String(200))
    date_signed_up: Mapped[Optional[date]] = mapped_column(Date)


class Client(Base):
    """
    Studio client.

    last_session_date is rewritten every time a session is booked for the
    client; it drives the new/active/inactive status.
    """
    __tablename__ = "client"

    client_email: Mapped[str] = mapped_column(String(100), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    street: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(50))
    state: Mapped[Optional[str]] = mapped_column(String(20))
    zip: Mapped[Optional[str]] = mapped_column(String(10))
    lead_source: Mapped[Optional[str]] = mapped_column(String(50))
    managed_by_staff_email: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("staff.staff_email")
    )
    marketing_lead_email: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("marketing_lead.email")
    )
    last_session_date: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_client_name", "last_name", "first_name"),
        Index("ix_client_manager", "managed_by_staff_email"),
    )


class PhotoSession(Base):
    """A booked shoot for one client."""
    __tablename__ = "photo_session"

    session_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    session_type: Mapped[Optional[str]] = mapped_column(String(50))
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    session_start_time: Mapped[Optional[time]] = mapped_column(Time)
    session_end_time: Mapped[Optional[time]] = mapped_column(Time)
    location: Mapped[Optional[str]] = mapped_column(String(200))
    package_name: Mapped[Optional[str]] = mapped_column(String(100))
    session_fee: Mapped[Optional[Decimal]] = mapped_column(Money)
    deposit_paid: Mapped[Optional[Decimal]] = mapped_column(Money, default=Decimal("0"))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    client_email: Mapped[str] = mapped_column(
        String(100), ForeignKey("client.client_email"), nullable=False
    )

    __table_args__ = (
        Index("ix_photo_session_date", "session_date"),
        Index("ix_photo_session_client", "client_email"),
    )


class PhotoSessionAssignment(Base):
    """Staff member working a session, with the role they fill on it."""
    __tablename__ = "photo_session_assignment"

    session_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("photo_session.session_id"), primary_key=True
    )
    staff_email: Mapped[str] = mapped_column(
        String(100), ForeignKey("staff.staff_email"), primary_key=True
    )
    role: Mapped[Optional[str]] = mapped_column(String(50))


class Product(Base):
    """Sellable item, keyed by SKU."""
    __tablename__ = "product"

    product_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    product_name: Mapped[str] = mapped_column(String(100), nullable=False)
    cost_price: Mapped[Optional[Decimal]] = mapped_column(Money)
    sale_price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    stock_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    supplier: Mapped[Optional[str]] = mapped_column(String(100))


class Invoice(Base):
    """
    Invoice header.

    balance_due is kept equal to total_due - payment_received by the payment
    operation; nothing in the schema enforces it.
    """
    __tablename__ = "invoice"

    invoice_number: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    tax: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    total_due: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    balance_due: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    payment_received: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    balance_due_date: Mapped[Optional[date]] = mapped_column(Date)
    client_email: Mapped[str] = mapped_column(
        String(100), ForeignKey("client.client_email"), nullable=False
    )

    __table_args__ = (
        Index("ix_invoice_date", "invoice_date"),
        Index("ix_invoice_client", "client_email"),
    )


class InvoiceLineItem(Base):
    """Quantity of one product on one invoice; priced at read time."""
    __tablename__ = "invoice_line_item"

    invoice_number: Mapped[int] = mapped_column(
        Integer, ForeignKey("invoice.invoice_number"), primary_key=True
    )
    product_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("product.product_id"), primary_key=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
