"""
Fare split calculation.

Turns a fare amount and a tenant's fee policy into the ordered list of
ledger lines for that payment:

     FARE, SERVICE_FEE, [DAILY_FEE], [SAVINGS], [LOAN_REPAY]

SERVICE_FEE is always present, even at 0.00, so totals stay auditable.
The optional lines appear only when their rounded amount is positive.
Pure function: no I/O, safe for price previews.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from models.ledger_entry import LedgerEntryType
from services.money import ZERO, Number, percent_of, round2


@dataclass(frozen=True)
class SplitLine:
     """One monetary component of a fare."""
     entry_type: LedgerEntryType
     amount: Decimal

     def to_dict(self) -> dict:
          return {"type": self.entry_type.value, "amount": self.amount}


def compute_splits(amount: Number, policy, charge_daily_fee: bool) -> List[SplitLine]:
     """
     Compute the split lines for one fare.

     Args:
          amount: Fare paid by the passenger.
          policy: Object with flat_fee, savings_percent, daily_fee and
               loan_repay_percent attributes.
          charge_daily_fee: Whether this payment carries the vehicle's
               daily cooperative fee.

     Returns:
          Ordered list of SplitLine.
     """
     fare = round2(amount)
     lines = [
          SplitLine(LedgerEntryType.FARE, fare),
          SplitLine(LedgerEntryType.SERVICE_FEE, round2(policy.flat_fee)),
     ]

     if charge_daily_fee:
          daily_fee = round2(policy.daily_fee)
          if daily_fee > ZERO:
               lines.append(SplitLine(LedgerEntryType.DAILY_FEE, daily_fee))

     savings = percent_of(fare, policy.savings_percent)
     if savings > ZERO:
          lines.append(SplitLine(LedgerEntryType.SAVINGS, savings))

     loan_repay = percent_of(fare, policy.loan_repay_percent)
     if loan_repay > ZERO:
          lines.append(SplitLine(LedgerEntryType.LOAN_REPAY, loan_repay))

     return lines


def total(lines: List[SplitLine]) -> Decimal:
     return sum((line.amount for line in lines), ZERO)
