"""
Fee policy and fare quote routes.

Policies are administrative (bearer token required); quotes are public so
payment terminals can preview a split before the passenger pays.
"""
from fastapi import APIRouter, Depends

from dependencies import get_policy_store, get_settlement_coordinator, verify_token
from schemas.fees import (
     PolicyResponse,
     PolicyUpdate,
     QuoteRequest,
     QuoteResponse,
     SplitLineResponse,
)
from services.policy_store import PolicyStore
from services.settlement_service import SettlementCoordinator
from services.split_calculator import total

router = APIRouter(prefix="/api", tags=["fees"])


@router.get("/policies/{tenant_id}", response_model=PolicyResponse, summary="Get a fee policy")
def get_policy(
     tenant_id: str,
     store: PolicyStore = Depends(get_policy_store),
     token: dict = Depends(verify_token),
):
     """Returns the stored policy, or the defaults (`is_default=true`)."""
     return store.get_policy(tenant_id)


@router.put("/policies/{tenant_id}", response_model=PolicyResponse, summary="Create or update a fee policy")
def update_policy(
     tenant_id: str,
     body: PolicyUpdate,
     store: PolicyStore = Depends(get_policy_store),
     token: dict = Depends(verify_token),
):
     return store.upsert_policy(tenant_id, **body.model_dump(exclude_none=True))


@router.post("/fees/quote", response_model=QuoteResponse, summary="Preview a fare split")
def quote_fare(
     body: QuoteRequest,
     coordinator: SettlementCoordinator = Depends(get_settlement_coordinator),
):
     lines = coordinator.quote(body.tenant_id, body.amount, vehicle_id=body.vehicle_id)
     return QuoteResponse(
          tenant_id=body.tenant_id,
          vehicle_id=body.vehicle_id,
          splits=[SplitLineResponse(entry_type=line.entry_type, amount=line.amount) for line in lines],
          total=total(lines),
     )
