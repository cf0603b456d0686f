"""
Pydantic schemas for fee policies and fare quotes.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from models.ledger_entry import LedgerEntryType


class PolicyUpdate(BaseModel):
     """Body for PUT /api/policies/{tenant_id}. Omitted fields are unchanged."""

     flat_fee: Optional[Decimal] = Field(None, description="Flat passenger fee per fare")
     savings_percent: Optional[Decimal] = Field(None, description="% of fare moved to savings")
     daily_fee: Optional[Decimal] = Field(None, description="Cooperative fee, once per vehicle per day")
     loan_repay_percent: Optional[Decimal] = Field(None, description="% of fare applied to loan repayment")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "flat_fee": 2.50,
                    "savings_percent": 5.00,
                    "daily_fee": 50.00,
                    "loan_repay_percent": 0.00,
               }
          }
     )


class PolicyResponse(BaseModel):
     tenant_id: str
     flat_fee: Decimal
     savings_percent: Decimal
     daily_fee: Decimal
     loan_repay_percent: Decimal
     is_default: bool = False

     model_config = ConfigDict(from_attributes=True)


class QuoteRequest(BaseModel):
     """Body for POST /api/fees/quote."""

     tenant_id: str = Field(..., min_length=1, max_length=64)
     amount: Decimal = Field(..., ge=0)
     vehicle_id: Optional[str] = Field(None, max_length=64)


class SplitLineResponse(BaseModel):
     entry_type: LedgerEntryType
     amount: Decimal


class QuoteResponse(BaseModel):
     tenant_id: str
     vehicle_id: Optional[str] = None
     splits: List[SplitLineResponse]
     total: Decimal


class LedgerSummaryResponse(BaseModel):
     """Totals per ledger entry type over [start, end)."""

     start: datetime
     end: datetime
     totals: dict[str, Decimal]
     net_to_owner: Decimal
