# app/domains/corp/schemas.py

"""
Request/response models of the 'corp' domain.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from . import models as corp_models


class BusinessCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    business_type: corp_models.BusinessType = corp_models.BusinessType.RETAIL
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)


class BusinessUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    business_type: Optional[corp_models.BusinessType] = None
    address: Optional[str] = None
    phone: Optional[str] = None


class BusinessRead(BusinessCreate):
    id: int
    created_at: datetime
    updated_at: datetime
