"""
Report Service - read-only ledger summaries for cooperatives and vehicles.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from models import FareTransaction, LedgerEntry, LedgerEntryType, TransactionStatus
from services.money import ZERO, round2


class ReportService:
     """Service class for ledger reporting."""

     @staticmethod
     def summarize(
          db: Session,
          start: datetime,
          end: datetime,
          tenant_id: Optional[str] = None,
          vehicle_id: Optional[str] = None,
     ) -> dict:
          """
          Total ledger amounts per entry type over [start, end).

          NET_TO_OWNER is what the vehicle owner keeps of the fares:
          FARE - SAVINGS - LOAN_REPAY - DAILY_FEE.

          Args:
               db: SQLAlchemy database session
               start: Inclusive lower bound on entry creation time
               end: Exclusive upper bound
               tenant_id: Restrict to one cooperative
               vehicle_id: Restrict to one vehicle

          Returns:
               Dictionary with the range, per-type totals and net_to_owner
          """
          query = (
               db.query(LedgerEntry.entry_type, func.sum(LedgerEntry.amount))
               .filter(LedgerEntry.created_at >= start, LedgerEntry.created_at < end)
          )
          if tenant_id:
               query = query.filter(LedgerEntry.tenant_id == tenant_id)
          if vehicle_id:
               query = query.filter(LedgerEntry.vehicle_id == vehicle_id)

          totals: Dict[str, Decimal] = {t.value: ZERO for t in LedgerEntryType}
          for entry_type, amount in query.group_by(LedgerEntry.entry_type).all():
               totals[entry_type.value] = round2(amount or 0)

          net_to_owner = round2(
               totals[LedgerEntryType.FARE.value]
               - totals[LedgerEntryType.SAVINGS.value]
               - totals[LedgerEntryType.LOAN_REPAY.value]
               - totals[LedgerEntryType.DAILY_FEE.value]
          )
          return {
               "start": start,
               "end": end,
               "totals": totals,
               "net_to_owner": net_to_owner,
          }

     @staticmethod
     def recent_transactions(
          db: Session,
          tenant_id: Optional[str] = None,
          vehicle_id: Optional[str] = None,
          status: Optional[TransactionStatus] = None,
          limit: int = 50,
     ) -> List[FareTransaction]:
          """Newest-first transactions, optionally filtered."""
          query = db.query(FareTransaction).options(selectinload(FareTransaction.ledger_entries))
          if tenant_id:
               query = query.filter(FareTransaction.tenant_id == tenant_id)
          if vehicle_id:
               query = query.filter(FareTransaction.vehicle_id == vehicle_id)
          if status is not None:
               query = query.filter(FareTransaction.status == status)
          return (
               query.order_by(FareTransaction.created_at.desc(), FareTransaction.id.desc())
               .limit(max(1, min(limit, 500)))
               .all()
          )
