"""
Fee policy lookup and administration.

Policies are read on every settlement and changed rarely, so reads go
through an injected TTLCache keyed by tenant. Missing policies are not an
error: the service defaults apply.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from logging_config import get_logger
from models import FeePolicy
from services.cache import TTLCache
from services.exceptions import StorageError, ValidationError
from services.money import ZERO, Number, round2, to_decimal

logger = get_logger(__name__)


@dataclass(frozen=True)
class Policy:
     """Immutable snapshot of a tenant's fee policy."""
     tenant_id: str
     flat_fee: Decimal = Decimal("2.50")
     savings_percent: Decimal = Decimal("5.00")
     daily_fee: Decimal = Decimal("50.00")
     loan_repay_percent: Decimal = Decimal("0.00")
     is_default: bool = False

     @classmethod
     def defaults(cls, tenant_id: str) -> "Policy":
          return cls(tenant_id=tenant_id, is_default=True)

     @classmethod
     def from_model(cls, row: FeePolicy) -> "Policy":
          return cls(
               tenant_id=row.tenant_id,
               flat_fee=round2(row.flat_fee),
               savings_percent=round2(row.savings_percent),
               daily_fee=round2(row.daily_fee),
               loan_repay_percent=round2(row.loan_repay_percent),
          )


def _non_negative(name: str, value: Optional[Number]) -> Optional[Decimal]:
     if value is None:
          return None
     try:
          number = round2(to_decimal(value))
     except ValueError:
          raise ValidationError(f"{name} must be a number")
     if number < ZERO:
          raise ValidationError(f"{name} must not be negative")
     return number


class PolicyStore:
     """Reads and updates per-tenant fee policies."""

     def __init__(self, db: Session, cache: Optional[TTLCache] = None):
          self.db = db
          self.cache = cache

     def get_policy(self, tenant_id: str) -> Policy:
          """Return the tenant's policy, or the defaults when none is stored."""
          if self.cache is not None:
               cached = self.cache.get(tenant_id)
               if cached is not None:
                    return cached

          try:
               row = self.db.query(FeePolicy).filter(FeePolicy.tenant_id == tenant_id).first()
          except SQLAlchemyError as exc:
               raise StorageError(f"failed to load fee policy for tenant {tenant_id}") from exc

          policy = Policy.from_model(row) if row is not None else Policy.defaults(tenant_id)
          if self.cache is not None:
               self.cache.set(tenant_id, policy)
          return policy

     def upsert_policy(
          self,
          tenant_id: str,
          flat_fee: Optional[Number] = None,
          savings_percent: Optional[Number] = None,
          daily_fee: Optional[Number] = None,
          loan_repay_percent: Optional[Number] = None,
     ) -> Policy:
          """
          Create or update a tenant's policy.

          Omitted values keep their current setting (or the default for a
          new policy). Currency values are rounded to cents.

          Raises:
               ValidationError: tenant_id is blank or a value is negative.
               StorageError: the write failed.
          """
          if not tenant_id or not str(tenant_id).strip():
               raise ValidationError("tenant_id is required")

          changes = {
               "flat_fee": _non_negative("flat_fee", flat_fee),
               "savings_percent": _non_negative("savings_percent", savings_percent),
               "daily_fee": _non_negative("daily_fee", daily_fee),
               "loan_repay_percent": _non_negative("loan_repay_percent", loan_repay_percent),
          }
          changes = {k: v for k, v in changes.items() if v is not None}

          try:
               row = self.db.query(FeePolicy).filter(FeePolicy.tenant_id == tenant_id).first()
               current = Policy.from_model(row) if row is not None else Policy.defaults(tenant_id)
               updated = replace(current, is_default=False, **changes)

               if row is None:
                    row = FeePolicy(tenant_id=tenant_id)
                    self.db.add(row)
               row.flat_fee = updated.flat_fee
               row.savings_percent = updated.savings_percent
               row.daily_fee = updated.daily_fee
               row.loan_repay_percent = updated.loan_repay_percent
               self.db.commit()
          except SQLAlchemyError as exc:
               self.db.rollback()
               logger.exception("Fee policy update failed for tenant %s", tenant_id)
               raise StorageError(f"failed to save fee policy for tenant {tenant_id}") from exc
          finally:
               if self.cache is not None:
                    self.cache.invalidate(tenant_id)

          logger.info("Fee policy updated for tenant %s: %s", tenant_id, changes)
          return updated
