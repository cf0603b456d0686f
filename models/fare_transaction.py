import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class TransactionStatus(str, enum.Enum):
     """Enumeration for fare payment status."""
     PENDING = "PENDING"
     SUCCESS = "SUCCESS"
     FAILED = "FAILED"
     TIMEOUT = "TIMEOUT"


class FareTransaction(Base):
     """
     FareTransaction model - one passenger fare payment.

     `external_reference` is the payment network's idempotency key; every
     redelivery of a confirmation resolves to the same row.
     """
     __tablename__ = "fare_transactions"

     id = Column(Integer, primary_key=True, autoincrement=True)
     external_reference = Column(String(100), nullable=False, unique=True, index=True)

     tenant_id = Column(String(64), nullable=False, index=True)
     vehicle_id = Column(String(64), nullable=True, index=True)
     counterpart_id = Column(String(64), nullable=True)  # cashier or device
     payer_reference = Column(String(32), nullable=True)  # payer phone number

     fare_amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          Enum(TransactionStatus, name="transaction_status", create_constraint=True),
          default=TransactionStatus.PENDING,
          nullable=False,
          index=True
     )
     receipt = Column(String(64), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     ledger_entries = relationship(
          "LedgerEntry",
          back_populates="transaction",
          order_by="LedgerEntry.id",
     )

     def __repr__(self):
          return (
               f"<FareTransaction(id={self.id}, ref='{self.external_reference}', "
               f"amount={self.fare_amount}, status='{self.status.value}')>"
          )

     @property
     def is_settled(self) -> bool:
          """True once the payment has reached SUCCESS."""
          return self.status == TransactionStatus.SUCCESS
