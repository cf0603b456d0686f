"""
Ledger report routes for cooperatives and vehicles.

Ranges are half-open [start, end) in UTC and default to the current day.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models.fare_transaction import TransactionStatus
from schemas.fees import LedgerSummaryResponse
from schemas.payment import TransactionResponse
from services.clock import day_bounds, utcnow
from services.report_service import ReportService

router = APIRouter(prefix="/api", tags=["reports"])


def _resolve_range(start: Optional[datetime], end: Optional[datetime]):
     default_start, default_end = day_bounds(utcnow().date())
     start = start or default_start
     end = end or default_end
     if end <= start:
          raise HTTPException(
               status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
               detail="end must be after start",
          )
     return start, end


@router.get("/tenants/{tenant_id}/summary", response_model=LedgerSummaryResponse)
def tenant_summary(
     tenant_id: str,
     start: Optional[datetime] = Query(None),
     end: Optional[datetime] = Query(None),
     db: Session = Depends(get_session),
):
     start, end = _resolve_range(start, end)
     return ReportService.summarize(db, start, end, tenant_id=tenant_id)


@router.get("/vehicles/{vehicle_id}/summary", response_model=LedgerSummaryResponse)
def vehicle_summary(
     vehicle_id: str,
     start: Optional[datetime] = Query(None),
     end: Optional[datetime] = Query(None),
     db: Session = Depends(get_session),
):
     start, end = _resolve_range(start, end)
     return ReportService.summarize(db, start, end, vehicle_id=vehicle_id)


@router.get("/vehicles/{vehicle_id}/transactions", response_model=List[TransactionResponse])
def vehicle_transactions(
     vehicle_id: str,
     status_filter: Optional[TransactionStatus] = Query(None, alias="status"),
     limit: int = Query(50, ge=1, le=500),
     db: Session = Depends(get_session),
):
     return ReportService.recent_transactions(db, vehicle_id=vehicle_id, status=status_filter, limit=limit)
