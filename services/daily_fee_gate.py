"""
Daily cooperative fee gate.

A vehicle pays the cooperative's flat daily fee on its first settled fare
of the (UTC) day. `has_daily_fee_been_charged` is the read side used by
quotes and as a fast path; `try_claim` is the write side that decides
races: it inserts a DailyFeeClaim row whose unique (vehicle_id, day) key
lets exactly one concurrent settlement win.
"""
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from logging_config import get_logger
from models import DailyFeeClaim, FareTransaction, LedgerEntry, LedgerEntryType, TransactionStatus
from services.clock import day_bounds
from services.exceptions import StorageError

logger = get_logger(__name__)


class DailyFeeGate:
     """Decides whether a payment should carry the vehicle's daily fee."""

     def __init__(self, db: Session):
          self.db = db

     def has_daily_fee_been_charged(self, vehicle_id: Optional[str], day: date) -> bool:
          """
          True if a SUCCESS transaction already carries a DAILY_FEE line for
          this vehicle within the day. Always False without a vehicle.
          """
          if not vehicle_id:
               return False

          start, end = day_bounds(day)
          try:
               hit = (
                    self.db.query(LedgerEntry.id)
                    .join(FareTransaction, LedgerEntry.transaction_id == FareTransaction.id)
                    .filter(
                         LedgerEntry.vehicle_id == vehicle_id,
                         LedgerEntry.entry_type == LedgerEntryType.DAILY_FEE,
                         LedgerEntry.created_at >= start,
                         LedgerEntry.created_at < end,
                         FareTransaction.status == TransactionStatus.SUCCESS,
                    )
                    .first()
               )
          except SQLAlchemyError as exc:
               raise StorageError(f"failed to check daily fee for vehicle {vehicle_id}") from exc
          return hit is not None

     def try_claim(self, vehicle_id: str, day: date, transaction_id: int) -> bool:
          """
          Atomically reserve the day's fee for `transaction_id`.

          Runs in a SAVEPOINT so that losing the race only rolls back the
          claim, not the caller's transaction. Returns False if another
          payment holds the claim.
          """
          try:
               with self.db.begin_nested():
                    self.db.add(DailyFeeClaim(
                         vehicle_id=vehicle_id,
                         service_day=day,
                         transaction_id=transaction_id,
                    ))
          except IntegrityError:
               logger.info("Daily fee for vehicle %s on %s already claimed", vehicle_id, day)
               return False
          return True
