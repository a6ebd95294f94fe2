# app/domains/loc/schemas.py

"""
Request/response models of the 'loc' domain.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class StockLocationBase(SQLModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    parent_location_id: Optional[int] = None
    responsible_user_id: Optional[int] = None


class StockLocationCreate(StockLocationBase):
    business_id: int
    is_main: bool = False


class StockLocationUpdate(SQLModel):
    """The owning business cannot be changed."""
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_main: Optional[bool] = None
    parent_location_id: Optional[int] = None
    responsible_user_id: Optional[int] = None


class StockLocationRead(StockLocationBase):
    id: int
    business_id: int
    is_main: bool
    created_at: datetime
    updated_at: datetime


class StockLocationDropdown(SQLModel):
    id: int
    name: str
