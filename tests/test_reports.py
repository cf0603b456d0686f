"""Tests for ledger reporting."""

from datetime import timedelta
from decimal import Decimal

import pytest

from models import TransactionStatus
from services.clock import day_bounds
from services.report_service import ReportService


@pytest.fixture
def settled(coordinator, confirmation, clock):
    """Two settled fares for KDA-123A and one failed fare, an hour apart."""
    base = {**confirmation, "vehicle_id": "KDA-123A"}
    coordinator.settle({**base, "external_reference": "R1", "amount": "100"})
    clock.now += timedelta(hours=1)
    coordinator.settle({**base, "external_reference": "R2", "amount": "60"})
    clock.now += timedelta(hours=1)
    coordinator.settle({**base, "external_reference": "R3", "amount": "10", "success": False})
    return base


class TestSummarize:
    """Per-type totals."""

    def test_vehicle_totals(self, db, settled, clock) -> None:
        start, end = day_bounds(clock.now.date())

        summary = ReportService.summarize(db, start, end, vehicle_id="KDA-123A")

        assert summary["totals"] == {
            "FARE": Decimal("160.00"),
            "SERVICE_FEE": Decimal("5.00"),
            "DAILY_FEE": Decimal("50.00"),
            "SAVINGS": Decimal("8.00"),
            "LOAN_REPAY": Decimal("0.00"),
        }
        assert summary["net_to_owner"] == Decimal("102.00")

    def test_tenant_filter(self, db, settled, clock) -> None:
        start, end = day_bounds(clock.now.date())

        own = ReportService.summarize(db, start, end, tenant_id="sacco-001")
        other = ReportService.summarize(db, start, end, tenant_id="sacco-999")

        assert own["totals"]["FARE"] == Decimal("160.00")
        assert other["totals"]["FARE"] == Decimal("0.00")
        assert other["net_to_owner"] == Decimal("0.00")

    def test_range_is_half_open(self, db, settled, clock) -> None:
        start, _ = day_bounds(clock.now.date())

        summary = ReportService.summarize(db, start, start + timedelta(hours=9))

        # Only the 08:30 fare falls before 09:00
        assert summary["totals"]["FARE"] == Decimal("100.00")


class TestRecentTransactions:
    """Transaction listings."""

    def test_newest_first(self, db, settled) -> None:
        transactions = ReportService.recent_transactions(db, vehicle_id="KDA-123A")

        assert [t.external_reference for t in transactions] == ["R3", "R2", "R1"]

    def test_status_filter_and_limit(self, db, settled) -> None:
        transactions = ReportService.recent_transactions(
            db, vehicle_id="KDA-123A", status=TransactionStatus.SUCCESS, limit=1
        )

        assert [t.external_reference for t in transactions] == ["R2"]
        assert len(transactions[0].ledger_entries) == 3
