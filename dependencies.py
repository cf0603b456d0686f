"""
Shared FastAPI dependencies: auth and service construction.
"""
from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import settings
from database import get_session
from services.cache import TTLCache
from services.code_pool_service import CodePool
from services.policy_store import PolicyStore
from services.settlement_service import SettlementCoordinator


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ", 1)[1]
     try:
          return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")


def get_policy_cache(request: Request) -> TTLCache:
     """The application-wide policy cache created at start-up."""
     return request.app.state.policy_cache


def get_settlement_coordinator(
     db: Session = Depends(get_session),
     cache: TTLCache = Depends(get_policy_cache),
) -> SettlementCoordinator:
     return SettlementCoordinator(db, policy_cache=cache)


def get_policy_store(
     db: Session = Depends(get_session),
     cache: TTLCache = Depends(get_policy_cache),
) -> PolicyStore:
     return PolicyStore(db, cache)


def get_code_pool(db: Session = Depends(get_session)) -> CodePool:
     return CodePool(db, prefix=settings.ussd_prefix)
