"""
Payment API.

POST /api/payments/confirm: apply a payment confirmation from the payment
network. Safe to call repeatedly with the same payload; ledger lines are
written once, by the first delivery that reaches SUCCESS.
"""
from fastapi import APIRouter, Depends, status

from dependencies import get_settlement_coordinator
from schemas.payment import (
     LedgerEntryResponse,
     PaymentConfirmation,
     PaymentInitiateRequest,
     SettlementResponse,
     TransactionResponse,
)
from services.settlement_service import SettlementCoordinator

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "/confirm",
     response_model=SettlementResponse,
     summary="Apply a payment confirmation",
)
def confirm_payment(
     body: PaymentConfirmation,
     coordinator: SettlementCoordinator = Depends(get_settlement_coordinator),
):
     """
     Record the outcome of a payment and, on its first success, write the
     fare split to the ledger.

     - **success=false**: transaction recorded as FAILED, no ledger lines
     - **redelivery**: returns the existing state with `newly_settled=false`
     """
     result = coordinator.settle(body)
     return SettlementResponse(
          external_reference=result.transaction.external_reference,
          status=result.status,
          newly_settled=result.newly_settled,
          ledger_entries=[LedgerEntryResponse.model_validate(e) for e in result.ledger_entries],
     )


@router.post(
     "/initiate",
     response_model=TransactionResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a pending payment",
)
def initiate_payment(
     body: PaymentInitiateRequest,
     coordinator: SettlementCoordinator = Depends(get_settlement_coordinator),
):
     return coordinator.initiate(
          external_reference=body.external_reference,
          tenant_id=body.tenant_id,
          amount=body.amount,
          vehicle_id=body.vehicle_id,
          counterpart_id=body.counterpart_id,
          payer_reference=body.payer_reference,
     )


@router.post(
     "/{external_reference}/timeout",
     response_model=TransactionResponse,
     summary="Mark a pending payment as timed out",
)
def timeout_payment(
     external_reference: str,
     coordinator: SettlementCoordinator = Depends(get_settlement_coordinator),
):
     return coordinator.mark_timed_out(external_reference)


@router.get(
     "/{external_reference}",
     response_model=TransactionResponse,
     summary="Get a payment and its ledger lines",
)
def get_payment(
     external_reference: str,
     coordinator: SettlementCoordinator = Depends(get_settlement_coordinator),
):
     return coordinator.get_transaction(external_reference)
