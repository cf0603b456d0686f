"""Tests for the fare split calculator."""

from decimal import Decimal

import pytest

from models.ledger_entry import LedgerEntryType as T
from services.policy_store import Policy
from services.split_calculator import SplitLine, compute_splits, total


@pytest.fixture
def default_policy() -> Policy:
    return Policy(
        tenant_id="sacco-001",
        flat_fee=Decimal("2.5"),
        savings_percent=Decimal("5"),
        daily_fee=Decimal("50"),
        loan_repay_percent=Decimal("0"),
    )


def _as_pairs(lines):
    return [(line.entry_type, line.amount) for line in lines]


class TestScenarios:
    """Worked examples."""

    def test_daily_fee_charged(self, default_policy) -> None:
        lines = compute_splits(100, default_policy, charge_daily_fee=True)

        assert _as_pairs(lines) == [
            (T.FARE, Decimal("100.00")),
            (T.SERVICE_FEE, Decimal("2.50")),
            (T.DAILY_FEE, Decimal("50.00")),
            (T.SAVINGS, Decimal("5.00")),
        ]

    def test_daily_fee_not_charged(self, default_policy) -> None:
        lines = compute_splits(100, default_policy, charge_daily_fee=False)

        assert _as_pairs(lines) == [
            (T.FARE, Decimal("100.00")),
            (T.SERVICE_FEE, Decimal("2.50")),
            (T.SAVINGS, Decimal("5.00")),
        ]

    def test_loan_repayment_line(self, default_policy) -> None:
        policy = Policy(tenant_id="t", savings_percent=Decimal("0"), loan_repay_percent=Decimal("10"))

        lines = compute_splits(Decimal("80"), policy, charge_daily_fee=False)

        assert _as_pairs(lines) == [
            (T.FARE, Decimal("80.00")),
            (T.SERVICE_FEE, Decimal("2.50")),
            (T.LOAN_REPAY, Decimal("8.00")),
        ]


class TestLineRules:
    """Inclusion and rounding rules."""

    def test_zero_service_fee_is_still_a_line(self) -> None:
        policy = Policy(tenant_id="t", flat_fee=Decimal("0"), savings_percent=Decimal("0"))

        lines = compute_splits(10, policy, charge_daily_fee=False)

        assert _as_pairs(lines) == [(T.FARE, Decimal("10.00")), (T.SERVICE_FEE, Decimal("0.00"))]

    def test_zero_daily_fee_is_omitted_even_when_charged(self) -> None:
        policy = Policy(tenant_id="t", daily_fee=Decimal("0"))

        lines = compute_splits(100, policy, charge_daily_fee=True)

        assert T.DAILY_FEE not in [line.entry_type for line in lines]

    def test_savings_that_round_to_zero_are_omitted(self) -> None:
        policy = Policy(tenant_id="t", savings_percent=Decimal("0.01"))

        lines = compute_splits(10, policy, charge_daily_fee=False)

        assert T.SAVINGS not in [line.entry_type for line in lines]

    def test_amounts_round_half_up(self) -> None:
        policy = Policy(tenant_id="t", flat_fee=Decimal("1.005"), savings_percent=Decimal("5"))

        lines = dict(_as_pairs(compute_splits("10.005", policy, charge_daily_fee=False)))

        assert lines[T.FARE] == Decimal("10.01")
        assert lines[T.SERVICE_FEE] == Decimal("1.01")
        # 5% of the rounded fare 10.01 = 0.5005
        assert lines[T.SAVINGS] == Decimal("0.50")

    def test_float_amount_uses_printed_value(self, default_policy) -> None:
        lines = compute_splits(0.1 + 0.2, default_policy, charge_daily_fee=False)

        assert lines[0].amount == Decimal("0.30")

    def test_order_is_fixed(self) -> None:
        policy = Policy(tenant_id="t", loan_repay_percent=Decimal("3"))

        types = [line.entry_type for line in compute_splits(200, policy, charge_daily_fee=True)]

        assert types == [T.FARE, T.SERVICE_FEE, T.DAILY_FEE, T.SAVINGS, T.LOAN_REPAY]

    def test_to_dict(self) -> None:
        assert SplitLine(T.FARE, Decimal("1.00")).to_dict() == {"type": "FARE", "amount": Decimal("1.00")}


class TestSumInvariant:
    """Every component appears exactly once."""

    @pytest.mark.parametrize("amount", ["0", "1", "33.33", "99.99", "100", "1234.56"])
    @pytest.mark.parametrize("charge_daily_fee", [True, False])
    def test_total_is_sum_of_components(self, amount, charge_daily_fee) -> None:
        policy = Policy(
            tenant_id="t",
            flat_fee=Decimal("2.5"),
            savings_percent=Decimal("7.5"),
            daily_fee=Decimal("40"),
            loan_repay_percent=Decimal("2.25"),
        )

        lines = compute_splits(amount, policy, charge_daily_fee)
        by_type = {line.entry_type: line.amount for line in lines}

        assert len(by_type) == len(lines)
        expected = (
            by_type[T.FARE]
            + by_type[T.SERVICE_FEE]
            + by_type.get(T.DAILY_FEE, Decimal("0"))
            + by_type.get(T.SAVINGS, Decimal("0"))
            + by_type.get(T.LOAN_REPAY, Decimal("0"))
        )
        assert total(lines) == expected
        assert (T.DAILY_FEE in by_type) is charge_daily_fee
