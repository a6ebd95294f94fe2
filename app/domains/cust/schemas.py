# app/domains/cust/schemas.py

"""
Request/response models of the 'cust' domain.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from . import models as cust_models


# =============================================================================
# 1. areas
# =============================================================================
class AreaCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class AreaRead(AreaCreate):
    id: int


# =============================================================================
# 2. customers
# =============================================================================
class CustomerBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    shop_name: Optional[str] = Field(None, max_length=150)
    customer_type: cust_models.CustomerType = cust_models.CustomerType.RETAIL
    area_id: Optional[int] = None
    address: Optional[str] = Field(None, max_length=255)
    contact_number: str = Field(..., min_length=3, max_length=30)
    assigned_rep_id: Optional[int] = None
    notes: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    shop_name: Optional[str] = None
    customer_type: Optional[cust_models.CustomerType] = None
    area_id: Optional[int] = None
    address: Optional[str] = None
    contact_number: Optional[str] = Field(None, min_length=3, max_length=30)
    assigned_rep_id: Optional[int] = None
    notes: Optional[str] = None


class CustomerRead(CustomerBase):
    id: int
    code: str
    area: Optional[AreaRead] = None
    created_at: datetime
    updated_at: datetime
