from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint, func
from .base import Base


class DailyFeeClaim(Base):
     """
     Marker row for "the daily fee was taken for this vehicle on this day".

     The unique (vehicle_id, service_day) pair is what serializes concurrent
     payments for the same vehicle: only the insert that wins may add a
     DAILY_FEE ledger line.
     """
     __tablename__ = "daily_fee_claims"
     __table_args__ = (
          UniqueConstraint("vehicle_id", "service_day", name="uq_daily_fee_claims_vehicle_day"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     vehicle_id = Column(String(64), nullable=False)
     service_day = Column(Date, nullable=False)
     transaction_id = Column(
          Integer,
          ForeignKey("fare_transactions.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<DailyFeeClaim(vehicle_id='{self.vehicle_id}', day={self.service_day}, transaction_id={self.transaction_id})>"
