from sqlalchemy import Column, String, Numeric, DateTime, func
from .base import Base


class FeePolicy(Base):
     """
     FeePolicy model - per-cooperative fare split rules.

     Currency columns are stored at cent precision; percentages apply to
     the fare amount. A tenant without a row uses the service defaults.
     """
     __tablename__ = "fee_policies"

     tenant_id = Column(String(64), primary_key=True)

     flat_fee = Column(Numeric(10, 2), nullable=False, default=2.50)  # passenger fee charged by the platform
     savings_percent = Column(Numeric(5, 2), nullable=False, default=5.00)  # % of fare
     daily_fee = Column(Numeric(10, 2), nullable=False, default=50.00)  # once per day per vehicle
     loan_repay_percent = Column(Numeric(5, 2), nullable=False, default=0.00)  # % of fare

     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<FeePolicy(tenant_id='{self.tenant_id}', flat_fee={self.flat_fee}, daily_fee={self.daily_fee})>"
