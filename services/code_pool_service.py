"""
Short Code Pool Service - collision-free assignment of dial codes.

Codes render as PREFIX + BASE + CHECK + "#", e.g. "*001*1102#":
- BASE is a zero-padded 3-digit string, "001".."999"
- CHECK is the digital root of BASE (iterated digit sum, 1-9)

Claims are conditional updates guarded by `allocated = false`, never a
read followed by an unconditional write, so two administrators racing for
the same base cannot both win.
"""
import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from config import DEFAULT_USSD_PREFIX
from logging_config import get_logger
from models import CodeOwnerType, CodePoolEntry
from services.clock import utcnow
from services.exceptions import (
     AlreadyAllocated,
     ChecksumMismatch,
     FareSettlementError,
     InvalidCodeFormat,
     OutOfCodesError,
     StorageError,
     UnknownBase,
     ValidationError,
)

logger = get_logger(__name__)

POOL_RANGE = range(1, 1000)

# Three base digits and a check digit, optionally followed by "#"
_CODE_PATTERN = re.compile(r"(\d{3})(\d)#?$")


def digital_root(base) -> int:
     """Iterated decimal digit sum until one digit remains."""
     total = sum(int(c) for c in str(base) if c.isdigit())
     while total > 9:
          total = sum(int(c) for c in str(total))
     return total


def format_base(number: int) -> str:
     return f"{number:03d}"


def format_code(base: str, checksum_digit, prefix: Optional[str] = None) -> str:
     return f"{prefix or DEFAULT_USSD_PREFIX}{base}{checksum_digit}#"


def parse_code(code: str) -> Tuple[str, str]:
     """
     Split a dial code into (base, check digit).

     Raises:
          InvalidCodeFormat: the code does not end in four digits.
     """
     match = _CODE_PATTERN.search(str(code or "").strip())
     if not match:
          raise InvalidCodeFormat(f"invalid code format: {code!r}")
     return match.group(1), match.group(2)


class CodePool:
     """Allocator over the finite pool of short dial codes."""

     def __init__(
          self,
          db: Session,
          prefix: Optional[str] = None,
          clock: Callable[[], datetime] = utcnow,
     ):
          self.db = db
          self.prefix = prefix or DEFAULT_USSD_PREFIX
          self.clock = clock

     def seed(self) -> int:
          """Insert every missing base 001-999. Returns the number added."""
          try:
               existing = {base for (base,) in self.db.query(CodePoolEntry.base).all()}
               missing = [format_base(n) for n in POOL_RANGE if format_base(n) not in existing]
               self.db.add_all(
                    CodePoolEntry(base=base, checksum_digit=str(digital_root(base)), allocated=False)
                    for base in missing
               )
               self.db.commit()
          except SQLAlchemyError as exc:
               self.db.rollback()
               raise StorageError("failed to seed code pool") from exc
          if missing:
               logger.info("Seeded %s codes into the pool", len(missing))
          return len(missing)

     def assign_next(self, owner_type: CodeOwnerType, owner_id: str, prefix: Optional[str] = None) -> str:
          """
          Allocate the free code with the smallest base.

          The lowest free base is found and claimed in one UPDATE, so the
          statement that picks a code is also the one that takes it.

          Raises:
               OutOfCodesError: every code is allocated.
          """
          owner_type, owner_id = self._owner(owner_type, owner_id)
          try:
               while True:
                    claimed = self._claim_lowest(owner_type, owner_id)
                    if claimed is not None:
                         self.db.commit()
                         break
                    # Either the pool is empty or a concurrent claim took the base
                    self.db.rollback()
                    remaining = (
                         self.db.query(CodePoolEntry.base)
                         .filter(CodePoolEntry.allocated == False)  # noqa: E712
                         .first()
                    )
                    self.db.rollback()
                    if remaining is None:
                         raise OutOfCodesError("no free codes in pool")
          except FareSettlementError:
               raise
          except SQLAlchemyError as exc:
               self.db.rollback()
               raise StorageError("failed to assign code") from exc

          base, checksum_digit = claimed
          code = format_code(base, checksum_digit, prefix or self.prefix)
          logger.info("Assigned %s to %s %s", code, owner_type.value, owner_id)
          return code

     def bind_specific(
          self,
          owner_type: CodeOwnerType,
          owner_id: str,
          code: str,
          prefix: Optional[str] = None,
     ) -> str:
          """
          Allocate one particular code.

          Raises:
               InvalidCodeFormat: the code does not parse.
               ChecksumMismatch: the check digit is wrong.
               UnknownBase: the base is not in the pool.
               AlreadyAllocated: someone holds the code.
          """
          owner_type, owner_id = self._owner(owner_type, owner_id)
          base, provided = parse_code(code)
          expected = digital_root(base)
          if str(expected) != provided:
               raise ChecksumMismatch(base, provided, expected)

          try:
               if self._claim(base, owner_type, owner_id):
                    self.db.commit()
               else:
                    exists = self.db.query(CodePoolEntry.base).filter(CodePoolEntry.base == base).first()
                    self.db.rollback()
                    if exists is None:
                         raise UnknownBase(f"base {base} not in pool")
                    raise AlreadyAllocated(f"code {base}{provided} already allocated")
          except FareSettlementError:
               raise
          except SQLAlchemyError as exc:
               self.db.rollback()
               raise StorageError(f"failed to bind code {base}") from exc

          bound = format_code(base, provided, prefix or self.prefix)
          logger.info("Bound %s to %s %s", bound, owner_type.value, owner_id)
          return bound

     def _claim_lowest(self, owner_type: CodeOwnerType, owner_id: str) -> Optional[Tuple[str, str]]:
          free = aliased(CodePoolEntry)
          lowest_free = (
               select(func.min(free.base))
               .where(free.allocated == False)  # noqa: E712
               .scalar_subquery()
          )
          row = self.db.execute(
               update(CodePoolEntry)
               .where(CodePoolEntry.base == lowest_free, CodePoolEntry.allocated == False)  # noqa: E712
               .values(
                    allocated=True,
                    owner_type=owner_type,
                    owner_id=owner_id,
                    allocated_at=self.clock(),
               )
               .returning(CodePoolEntry.base, CodePoolEntry.checksum_digit)
               .execution_options(synchronize_session=False)
          ).first()
          return (row.base, row.checksum_digit) if row is not None else None

     def _claim(self, base: str, owner_type: CodeOwnerType, owner_id: str) -> bool:
          claimed = (
               self.db.query(CodePoolEntry)
               .filter(CodePoolEntry.base == base, CodePoolEntry.allocated == False)  # noqa: E712
               .update(
                    {
                         "allocated": True,
                         "owner_type": owner_type,
                         "owner_id": owner_id,
                         "allocated_at": self.clock(),
                    },
                    synchronize_session=False,
               )
          )
          return claimed == 1

     @staticmethod
     def _owner(owner_type, owner_id) -> Tuple[CodeOwnerType, str]:
          try:
               owner_type = CodeOwnerType(owner_type)
          except ValueError:
               raise ValidationError(f"owner_type must be one of {[t.value for t in CodeOwnerType]}")
          if owner_id is None or not str(owner_id).strip():
               raise ValidationError("owner_id is required")
          return owner_type, str(owner_id).strip()

     def list_available(self) -> List[CodePoolEntry]:
          return (
               self.db.query(CodePoolEntry)
               .populate_existing()
               .filter(CodePoolEntry.allocated == False)  # noqa: E712
               .order_by(CodePoolEntry.base)
               .all()
          )

     def list_allocated(self) -> List[CodePoolEntry]:
          return (
               self.db.query(CodePoolEntry)
               .populate_existing()
               .filter(CodePoolEntry.allocated == True)  # noqa: E712
               .order_by(CodePoolEntry.allocated_at.desc(), CodePoolEntry.base)
               .all()
          )

     def full_code(self, entry: CodePoolEntry, prefix: Optional[str] = None) -> str:
          return format_code(entry.base, entry.checksum_digit, prefix or self.prefix)
