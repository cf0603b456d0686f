"""
Pydantic schemas for short-code pool administration.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from models.code_pool import CodeOwnerType


class AssignNextRequest(BaseModel):
     """Body for POST /api/admin/ussd/pool/assign-next."""

     owner_type: CodeOwnerType
     owner_id: str = Field(..., min_length=1, max_length=64)
     prefix: Optional[str] = Field(None, max_length=16, description="Dial prefix for the rendered code")


class BindCodeRequest(BaseModel):
     """Body for POST /api/admin/ussd/bind-from-pool."""

     owner_type: CodeOwnerType
     owner_id: str = Field(..., min_length=1, max_length=64)
     code: str = Field(..., min_length=4, max_length=32, description="e.g. *001*1102#")
     prefix: Optional[str] = Field(None, max_length=16)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {"owner_type": "VEHICLE", "owner_id": "KDA-123A", "code": "*001*1102#"}
          }
     )


class CodeResponse(BaseModel):
     code: str
     base: str
     checksum_digit: str
     owner_type: CodeOwnerType
     owner_id: str


class PoolEntryResponse(BaseModel):
     base: str
     checksum_digit: str
     full_code: str
     owner_type: Optional[CodeOwnerType] = None
     owner_id: Optional[str] = None
     allocated_at: Optional[datetime] = None


class PoolListResponse(BaseModel):
     items: List[PoolEntryResponse]
