"""
Short-code pool administration routes.

All routes require an administrator bearer token. Codes are rendered with
the configured dial prefix unless the request supplies one.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dependencies import get_code_pool, verify_token
from schemas.code_pool import (
     AssignNextRequest,
     BindCodeRequest,
     CodeResponse,
     PoolEntryResponse,
     PoolListResponse,
)
from services.code_pool_service import CodePool, parse_code

router = APIRouter(prefix="/api/admin/ussd", tags=["code-pool"])


def _pool_items(pool: CodePool, entries, prefix: Optional[str]) -> PoolListResponse:
     return PoolListResponse(items=[
          PoolEntryResponse(
               base=entry.base,
               checksum_digit=entry.checksum_digit,
               full_code=pool.full_code(entry, prefix),
               owner_type=entry.owner_type,
               owner_id=entry.owner_id,
               allocated_at=entry.allocated_at,
          )
          for entry in entries
     ])


@router.get("/pool/available", response_model=PoolListResponse, summary="List free codes")
def list_available(
     prefix: Optional[str] = Query(None, max_length=16),
     pool: CodePool = Depends(get_code_pool),
     token: dict = Depends(verify_token),
):
     return _pool_items(pool, pool.list_available(), prefix)


@router.get("/pool/allocated", response_model=PoolListResponse, summary="List allocated codes")
def list_allocated(
     prefix: Optional[str] = Query(None, max_length=16),
     pool: CodePool = Depends(get_code_pool),
     token: dict = Depends(verify_token),
):
     return _pool_items(pool, pool.list_allocated(), prefix)


@router.post("/pool/assign-next", response_model=CodeResponse, summary="Assign the lowest free code")
def assign_next(
     body: AssignNextRequest,
     pool: CodePool = Depends(get_code_pool),
     token: dict = Depends(verify_token),
):
     code = pool.assign_next(body.owner_type, body.owner_id, prefix=body.prefix)
     base, checksum_digit = parse_code(code)
     return CodeResponse(
          code=code,
          base=base,
          checksum_digit=checksum_digit,
          owner_type=body.owner_type,
          owner_id=body.owner_id,
     )


@router.post("/bind-from-pool", response_model=CodeResponse, summary="Assign a specific code")
def bind_from_pool(
     body: BindCodeRequest,
     pool: CodePool = Depends(get_code_pool),
     token: dict = Depends(verify_token),
):
     code = pool.bind_specific(body.owner_type, body.owner_id, body.code, prefix=body.prefix)
     base, checksum_digit = parse_code(code)
     return CodeResponse(
          code=code,
          base=base,
          checksum_digit=checksum_digit,
          owner_type=body.owner_type,
          owner_id=body.owner_id,
     )
