"""
Pydantic schemas for the payment confirmation and lifecycle API.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from models.fare_transaction import TransactionStatus
from models.ledger_entry import LedgerEntryType


class PaymentConfirmation(BaseModel):
     """
     Confirmation delivered by the payment network (possibly more than once).

     external_reference, amount and tenant_id are required; their presence
     is checked by the settlement service so that every caller, HTTP or
     not, gets the same ValidationError.
     """

     external_reference: Optional[str] = Field(
          None, max_length=100, description="Unique idempotency key from the payment network"
     )
     success: bool = Field(..., description="Whether the payment went through")
     amount: Optional[Decimal] = Field(None, ge=0, description="Fare amount paid")
     tenant_id: Optional[str] = Field(None, max_length=64, description="Cooperative the fare belongs to")
     vehicle_id: Optional[str] = Field(None, max_length=64)
     counterpart_id: Optional[str] = Field(None, max_length=64, description="Cashier or device")
     payer_reference: Optional[str] = Field(None, max_length=32, description="Payer phone number")
     receipt: Optional[str] = Field(None, max_length=64, description="Payment network receipt id")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "external_reference": "ws_CO_170920261200001",
                    "success": True,
                    "amount": 100.00,
                    "tenant_id": "sacco-001",
                    "vehicle_id": "KDA-123A",
                    "counterpart_id": None,
                    "payer_reference": "254700000001",
                    "receipt": "QJK1X2Y3Z4",
               }
          }
     )


class PaymentInitiateRequest(BaseModel):
     """Request body for POST /api/payments/initiate."""

     external_reference: str = Field(..., min_length=1, max_length=100)
     amount: Decimal = Field(..., ge=0)
     tenant_id: str = Field(..., min_length=1, max_length=64)
     vehicle_id: Optional[str] = Field(None, max_length=64)
     counterpart_id: Optional[str] = Field(None, max_length=64)
     payer_reference: Optional[str] = Field(None, max_length=32)


class LedgerEntryResponse(BaseModel):
     """One ledger line."""

     entry_type: LedgerEntryType
     amount: Decimal
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class TransactionResponse(BaseModel):
     """A fare transaction and its ledger lines."""

     id: int
     external_reference: str
     tenant_id: str
     vehicle_id: Optional[str] = None
     counterpart_id: Optional[str] = None
     payer_reference: Optional[str] = None
     fare_amount: Decimal
     status: TransactionStatus
     receipt: Optional[str] = None
     created_at: datetime
     ledger_entries: List[LedgerEntryResponse] = Field(default_factory=list)

     model_config = ConfigDict(from_attributes=True)


class SettlementResponse(BaseModel):
     """Response for POST /api/payments/confirm."""

     external_reference: str
     status: TransactionStatus = Field(..., description="Transaction status after this delivery")
     newly_settled: bool = Field(..., description="True only for the delivery that wrote the ledger")
     ledger_entries: List[LedgerEntryResponse] = Field(default_factory=list)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "external_reference": "ws_CO_170920261200001",
                    "status": "SUCCESS",
                    "newly_settled": True,
                    "ledger_entries": [
                         {"entry_type": "FARE", "amount": 100.00, "created_at": "2026-09-17T12:00:00"},
                         {"entry_type": "SERVICE_FEE", "amount": 2.50, "created_at": "2026-09-17T12:00:00"},
                    ],
               }
          }
     )
