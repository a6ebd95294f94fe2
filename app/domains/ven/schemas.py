# app/domains/ven/schemas.py

"""
Request/response models of the 'ven' domain (suppliers).
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import EmailStr


class SupplierBase(SQLModel):
    code: str = Field(..., min_length=2, max_length=12)
    name: str = Field(..., min_length=1, max_length=100)
    notes: Optional[str] = None
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    credit_days: int = Field(0, ge=0)
    category_id: Optional[int] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(SQLModel):
    code: Optional[str] = Field(None, min_length=2, max_length=12)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    notes: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    credit_days: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = None


class SupplierRead(SupplierBase):
    id: int
    created_at: datetime
    updated_at: datetime


class SupplierDropdown(SQLModel):
    id: int
    code: str
    name: str
