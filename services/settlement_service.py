"""
Settlement Service - turns payment confirmations into ledger entries.

When a confirmation arrives:
1. Validate external_reference, amount and tenant_id
2. Record the outcome on the transaction keyed by external_reference
   (insert, or conditional update that never touches a SUCCESS row)
3. Only the delivery whose write moved the row into SUCCESS computes the
   split and writes the ledger lines

Steps 2 and 3 run in one database transaction, so ledger lines are written
all-or-nothing and exactly once however often the network redelivers.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from logging_config import get_logger
from models import FareTransaction, LedgerEntry, TransactionStatus
from schemas.payment import PaymentConfirmation
from services.cache import TTLCache
from services.clock import utcnow
from services.daily_fee_gate import DailyFeeGate
from services.exceptions import (
     FareSettlementError,
     StorageError,
     TransactionNotFound,
     ValidationError,
)
from services.money import ZERO, Number, round2, to_decimal
from services.policy_store import PolicyStore
from services.split_calculator import SplitLine, compute_splits

logger = get_logger(__name__)


@dataclass
class SettlementResult:
     """Outcome of one confirmation delivery."""
     transaction: FareTransaction
     newly_settled: bool
     ledger_entries: List[LedgerEntry] = field(default_factory=list)

     @property
     def status(self) -> TransactionStatus:
          return self.transaction.status


def _require_text(name: str, value: Any) -> str:
     if value is None or not str(value).strip():
          raise ValidationError(f"{name} is required")
     return str(value).strip()


def _require_amount(value: Any) -> Decimal:
     if value is None:
          raise ValidationError("amount is required")
     try:
          amount = round2(to_decimal(value))
     except ValueError:
          raise ValidationError("amount must be a number")
     if amount < ZERO:
          raise ValidationError("amount must not be negative")
     return amount


class SettlementCoordinator:
     """Applies payment confirmations and serves fare quotes for one session."""

     def __init__(
          self,
          db: Session,
          policy_cache: Optional[TTLCache] = None,
          clock: Callable[[], datetime] = utcnow,
     ):
          self.db = db
          self.policy_store = PolicyStore(db, policy_cache)
          self.daily_fee_gate = DailyFeeGate(db)
          self.clock = clock

     # ------------------------------------------------------------------
     # Confirmations
     # ------------------------------------------------------------------

     def settle(self, confirmation: Union[PaymentConfirmation, Mapping[str, Any]]) -> SettlementResult:
          """
          Apply a payment confirmation.

          Safe to call any number of times with the same payload: only the
          first delivery that reaches SUCCESS writes ledger lines; later
          ones return the existing state.

          Raises:
               ValidationError: a required field is missing or malformed.
               StorageError: the database failed; retry the same payload.
          """
          payload = self._validate(confirmation)
          reference = payload.external_reference.strip()
          now = self.clock()

          try:
               transaction, newly_settled = self._record_outcome(payload, now)
               entries: List[LedgerEntry] = []
               if newly_settled:
                    entries = self._write_ledger(transaction, now)
               self.db.commit()
          except FareSettlementError:
               self.db.rollback()
               raise
          except SQLAlchemyError as exc:
               self.db.rollback()
               logger.exception("Settlement of %s failed", reference)
               raise StorageError(f"failed to settle {reference}") from exc

          if newly_settled:
               logger.info(
                    "Settled %s: %s lines, total %s",
                    reference, len(entries), sum((e.amount for e in entries), ZERO),
               )
          elif transaction.is_settled:
               entries = list(transaction.ledger_entries)
               if payload.success:
                    logger.info("Duplicate confirmation for %s ignored", reference)
               else:
                    logger.warning("Failure notice for already settled %s ignored", reference)
          else:
               logger.info("Recorded %s as %s", reference, transaction.status.value)

          return SettlementResult(transaction=transaction, newly_settled=newly_settled, ledger_entries=entries)

     def _validate(self, confirmation) -> PaymentConfirmation:
          if not isinstance(confirmation, PaymentConfirmation):
               try:
                    confirmation = PaymentConfirmation.model_validate(confirmation)
               except PydanticValidationError as exc:
                    raise ValidationError(f"malformed confirmation: {exc.errors()}") from exc

          _require_text("external_reference", confirmation.external_reference)
          _require_text("tenant_id", confirmation.tenant_id)
          _require_amount(confirmation.amount)
          return confirmation

     def _record_outcome(self, payload: PaymentConfirmation, now: datetime) -> Tuple[FareTransaction, bool]:
          """
          Upsert the transaction row for this delivery.

          Returns the row and whether this call moved it into SUCCESS. The
          update is conditional on `status != SUCCESS`, so of any number of
          concurrent deliveries at most one sees it succeed for a SUCCESS
          target; the unique external_reference covers the insert race.
          """
          reference = payload.external_reference.strip()
          target = TransactionStatus.SUCCESS if payload.success else TransactionStatus.FAILED
          values = {
               "status": target,
               "tenant_id": payload.tenant_id.strip(),
               "vehicle_id": payload.vehicle_id or None,
               "counterpart_id": payload.counterpart_id or None,
               "payer_reference": payload.payer_reference or None,
               "fare_amount": round2(payload.amount),
               "receipt": payload.receipt or None,
          }

          moved = self._transition_unsettled(reference, values)
          if not moved and self._find(reference) is None:
               try:
                    with self.db.begin_nested():
                         self.db.add(FareTransaction(
                              external_reference=reference,
                              created_at=now,
                              **values,
                         ))
               except IntegrityError:
                    # A concurrent delivery inserted the row first
                    moved = self._transition_unsettled(reference, values)
               else:
                    moved = True

          transaction = self._find(reference)
          return transaction, moved and target == TransactionStatus.SUCCESS

     def _transition_unsettled(self, reference: str, values: dict) -> bool:
          updated = (
               self.db.query(FareTransaction)
               .filter(
                    FareTransaction.external_reference == reference,
                    FareTransaction.status != TransactionStatus.SUCCESS,
               )
               .update(values, synchronize_session=False)
          )
          return updated == 1

     def _find(self, reference: str) -> Optional[FareTransaction]:
          return (
               self.db.query(FareTransaction)
               .populate_existing()
               .options(selectinload(FareTransaction.ledger_entries))
               .filter(FareTransaction.external_reference == reference)
               .first()
          )

     def _write_ledger(self, transaction: FareTransaction, now: datetime) -> List[LedgerEntry]:
          policy = self.policy_store.get_policy(transaction.tenant_id)

          # A zero daily fee writes no line, so it must not take the day's claim
          charge_daily_fee = False
          if transaction.vehicle_id and round2(policy.daily_fee) > ZERO:
               day = now.date()
               if not self.daily_fee_gate.has_daily_fee_been_charged(transaction.vehicle_id, day):
                    charge_daily_fee = self.daily_fee_gate.try_claim(transaction.vehicle_id, day, transaction.id)

          entries = [
               LedgerEntry(
                    transaction_id=transaction.id,
                    tenant_id=transaction.tenant_id,
                    vehicle_id=transaction.vehicle_id,
                    entry_type=line.entry_type,
                    amount=line.amount,
                    created_at=now,
               )
               for line in compute_splits(transaction.fare_amount, policy, charge_daily_fee)
          ]
          self.db.add_all(entries)
          self.db.flush()
          return entries

     # ------------------------------------------------------------------
     # Quotes
     # ------------------------------------------------------------------

     def quote(
          self,
          tenant_id: str,
          amount: Number,
          vehicle_id: Optional[str] = None,
          day: Optional[date] = None,
     ) -> List[SplitLine]:
          """
          Price preview: the split a payment would get right now.

          Reads only. A concurrent payment may still take the daily fee
          before this fare settles.
          """
          tenant_id = _require_text("tenant_id", tenant_id)
          fare = _require_amount(amount)
          policy = self.policy_store.get_policy(tenant_id)
          charge_daily_fee = False
          if vehicle_id and round2(policy.daily_fee) > ZERO:
               day = day or self.clock().date()
               charge_daily_fee = not self.daily_fee_gate.has_daily_fee_been_charged(vehicle_id, day)
          return compute_splits(fare, policy, charge_daily_fee)

     # ------------------------------------------------------------------
     # Transaction lifecycle
     # ------------------------------------------------------------------

     def initiate(
          self,
          external_reference: str,
          tenant_id: str,
          amount: Number,
          vehicle_id: Optional[str] = None,
          counterpart_id: Optional[str] = None,
          payer_reference: Optional[str] = None,
     ) -> FareTransaction:
          """
          Record a payment request as PENDING.

          Idempotent on external_reference: an existing transaction is
          returned unchanged.
          """
          reference = _require_text("external_reference", external_reference)
          tenant_id = _require_text("tenant_id", tenant_id)
          fare = _require_amount(amount)

          try:
               existing = self._find(reference)
               if existing is not None:
                    return existing
               try:
                    with self.db.begin_nested():
                         self.db.add(FareTransaction(
                              external_reference=reference,
                              tenant_id=tenant_id,
                              vehicle_id=vehicle_id or None,
                              counterpart_id=counterpart_id or None,
                              payer_reference=payer_reference or None,
                              fare_amount=fare,
                              status=TransactionStatus.PENDING,
                              created_at=self.clock(),
                         ))
               except IntegrityError:
                    logger.info("Payment %s was initiated concurrently", reference)
               transaction = self._find(reference)
               self.db.commit()
          except SQLAlchemyError as exc:
               self.db.rollback()
               logger.exception("Initiating payment %s failed", reference)
               raise StorageError(f"failed to initiate {reference}") from exc

          logger.info("Payment %s initiated for tenant %s", reference, tenant_id)
          return transaction

     def mark_timed_out(self, external_reference: str) -> FareTransaction:
          """
          Move a PENDING transaction to TIMEOUT. Other states are left as is.

          Raises:
               TransactionNotFound: no transaction has this reference.
          """
          reference = _require_text("external_reference", external_reference)
          try:
               updated = (
                    self.db.query(FareTransaction)
                    .filter(
                         FareTransaction.external_reference == reference,
                         FareTransaction.status == TransactionStatus.PENDING,
                    )
                    .update({"status": TransactionStatus.TIMEOUT}, synchronize_session=False)
               )
               transaction = self._find(reference)
               self.db.commit()
          except SQLAlchemyError as exc:
               self.db.rollback()
               raise StorageError(f"failed to time out {reference}") from exc

          if transaction is None:
               raise TransactionNotFound(f"no transaction with reference {reference}")
          if updated:
               logger.info("Payment %s timed out", reference)
          return transaction

     def get_transaction(self, external_reference: str) -> FareTransaction:
          reference = _require_text("external_reference", external_reference)
          try:
               transaction = self._find(reference)
          except SQLAlchemyError as exc:
               raise StorageError(f"failed to load {reference}") from exc
          if transaction is None:
               raise TransactionNotFound(f"no transaction with reference {reference}")
          return transaction
