import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum, false
from .base import Base


class CodeOwnerType(str, enum.Enum):
     """Kinds of entity a short code can be assigned to."""
     TENANT = "TENANT"
     VEHICLE = "VEHICLE"


class CodePoolEntry(Base):
     """
     CodePoolEntry model - one short dial code in the finite 001-999 pool.

     Rows are seeded once; afterwards only the allocation columns change,
     and only through a conditional update guarded by `allocated = false`.
     An allocated row always carries owner_type and owner_id.
     """
     __tablename__ = "code_pool"

     base = Column(String(3), primary_key=True)  # "001".."999"
     checksum_digit = Column(String(1), nullable=False)  # digital root of base

     allocated = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)
     owner_type = Column(Enum(CodeOwnerType, name="code_owner_type", create_constraint=True), nullable=True)
     owner_id = Column(String(64), nullable=True, index=True)
     allocated_at = Column(DateTime, nullable=True)

     def __repr__(self):
          return f"<CodePoolEntry(base='{self.base}', allocated={self.allocated}, owner={self.owner_type}:{self.owner_id})>"
