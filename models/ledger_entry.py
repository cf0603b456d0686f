"""
LedgerEntry model - immutable monetary components of a settled fare.

Rows are written once, when their transaction first reaches SUCCESS, and
are never updated or deleted. At most one row per entry type exists for a
transaction.
"""
import enum
from sqlalchemy import (
     Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from .base import Base


class LedgerEntryType(str, enum.Enum):
     """Monetary components of a fare, in display order."""
     FARE = "FARE"
     SERVICE_FEE = "SERVICE_FEE"
     DAILY_FEE = "DAILY_FEE"
     SAVINGS = "SAVINGS"
     LOAN_REPAY = "LOAN_REPAY"


class LedgerEntry(Base):
     """One split line of a settled fare payment."""
     __tablename__ = "ledger_entries"
     __table_args__ = (
          UniqueConstraint("transaction_id", "entry_type", name="uq_ledger_entries_transaction_type"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     transaction_id = Column(
          Integer,
          ForeignKey("fare_transactions.id", ondelete="RESTRICT"),  # settled transactions are never deleted
          nullable=False,
          index=True
     )
     tenant_id = Column(String(64), nullable=False, index=True)
     vehicle_id = Column(String(64), nullable=True, index=True)
     entry_type = Column(
          Enum(LedgerEntryType, name="ledger_entry_type", create_constraint=True),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     # Relationships
     transaction = relationship("FareTransaction", back_populates="ledger_entries")

     def __repr__(self):
          return f"<LedgerEntry(id={self.id}, transaction_id={self.transaction_id}, {self.entry_type.value}={self.amount})>"
