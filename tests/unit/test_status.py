"""
Unit Tests - Status Derivation Rules
"""
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from studio.domain.status import (
    ClientStatus,
    InvoiceStatus,
    LeadStatus,
    ReorderStatus,
    SessionStatus,
    StockStatus,
    client_status,
    invoice_status,
    lead_status,
    reorder_status,
    session_status,
    stock_status,
    subtract_months,
)

NOW = datetime(2025, 6, 15, 12, 0, 0)


class TestSubtractMonths:
    """Tests for calendar month arithmetic"""

    def test_same_day_of_month(self):
        assert subtract_months(date(2025, 6, 15), 6) == date(2024, 12, 15)

    def test_clamps_to_month_end(self):
        assert subtract_months(date(2025, 8, 31), 6) == date(2025, 2, 28)

    def test_leap_year(self):
        assert subtract_months(date(2024, 8, 31), 6) == date(2024, 2, 29)


class TestInvoiceStatus:
    """Tests for invoice payment status"""

    def test_zero_balance_is_paid(self):
        assert invoice_status(Decimal("0.00"), date(2020, 1, 1), NOW) == InvoiceStatus.PAID

    def test_past_due_date_is_overdue(self):
        assert invoice_status(Decimal("50.00"), date(2025, 6, 14), NOW) == InvoiceStatus.OVERDUE

    def test_due_today_after_midnight_is_overdue(self):
        assert invoice_status(Decimal("50.00"), date(2025, 6, 15), NOW) == InvoiceStatus.OVERDUE

    def test_due_today_at_midnight_is_pending(self):
        midnight = datetime(2025, 6, 15, 0, 0, 0)
        assert invoice_status(Decimal("50.00"), date(2025, 6, 15), midnight) == InvoiceStatus.PENDING

    def test_future_due_date_is_pending(self):
        assert invoice_status(Decimal("50.00"), date(2025, 7, 1), NOW) == InvoiceStatus.PENDING

    def test_no_due_date_is_pending(self):
        assert invoice_status(Decimal("300.00"), None, NOW) == InvoiceStatus.PENDING

    def test_credit_balance_is_never_overdue(self):
        assert invoice_status(Decimal("-50.00"), date(2025, 6, 1), NOW) == InvoiceStatus.PENDING


class TestClientStatus:
    """Tests for client engagement status"""

    def test_no_sessions_is_new(self):
        assert client_status(None, NOW) == ClientStatus.NEW

    def test_recent_session_is_active(self):
        assert client_status(date(2025, 5, 1), NOW) == ClientStatus.ACTIVE

    def test_exactly_six_months_is_active(self):
        assert client_status(date(2024, 12, 15), NOW) == ClientStatus.ACTIVE

    def test_day_before_boundary_is_inactive(self):
        assert client_status(date(2024, 12, 14), NOW) == ClientStatus.INACTIVE

    def test_future_session_is_active(self):
        assert client_status(date(2025, 9, 1), NOW) == ClientStatus.ACTIVE


class TestSessionStatus:
    """Tests for session timeline status"""

    DAY = date(2025, 6, 15)

    def test_ended_session_is_completed(self):
        assert session_status(self.DAY, time(9), time(11), NOW) == SessionStatus.COMPLETED

    def test_running_session_is_in_progress(self):
        assert session_status(self.DAY, time(11), time(13), NOW) == SessionStatus.IN_PROGRESS

    def test_later_today_is_upcoming(self):
        assert session_status(self.DAY, time(14), time(16), NOW) == SessionStatus.UPCOMING

    def test_boundaries_are_in_progress(self):
        assert session_status(self.DAY, time(12), time(12), NOW) == SessionStatus.IN_PROGRESS

    def test_missing_end_time_ends_at_start(self):
        assert session_status(self.DAY, time(10), None, NOW) == SessionStatus.COMPLETED
        assert session_status(self.DAY, time(15), None, NOW) == SessionStatus.UPCOMING

    def test_missing_times_mean_midnight(self):
        assert session_status(self.DAY, None, None, NOW) == SessionStatus.COMPLETED

    def test_past_and_future_days(self):
        assert session_status(date(2025, 6, 1), time(10), time(12), NOW) == SessionStatus.COMPLETED
        assert session_status(date(2025, 7, 1), time(10), time(12), NOW) == SessionStatus.UPCOMING


class TestStockStatus:
    """Tests for the catalogue and reorder thresholds"""

    @pytest.mark.parametrize("stock,expected", [
        (0, StockStatus.LOW),
        (5, StockStatus.LOW),
        (6, StockStatus.MEDIUM),
        (20, StockStatus.MEDIUM),
        (21, StockStatus.HIGH),
    ])
    def test_catalogue_levels(self, stock, expected):
        assert stock_status(stock) == expected

    @pytest.mark.parametrize("stock,expected", [
        (0, ReorderStatus.OUT_OF_STOCK),
        (1, ReorderStatus.LOW_STOCK),
        (10, ReorderStatus.LOW_STOCK),
        (11, ReorderStatus.IN_STOCK),
    ])
    def test_reorder_levels(self, stock, expected):
        assert reorder_status(stock) == expected

    def test_threshold_sets_disagree_on_purpose(self):
        assert stock_status(8) == StockStatus.MEDIUM
        assert reorder_status(8) == ReorderStatus.LOW_STOCK


class TestLeadStatus:
    """Tests for marketing lead conversion"""

    def test_referenced_lead_is_converted(self):
        assert lead_status("jane@x.com") == LeadStatus.CONVERTED

    def test_unreferenced_lead(self):
        assert lead_status(None) == LeadStatus.LEAD
