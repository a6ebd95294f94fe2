# app/domains/inv/schemas.py

"""
Request/response models of the 'inv' domain.
"""

from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from sqlmodel import SQLModel, Field

from . import models as inv_models


# =============================================================================
# 1. categories
# =============================================================================
class CategoryCreate(SQLModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    category_type: inv_models.CategoryType = inv_models.CategoryType.PRODUCT


class CategoryRead(CategoryCreate):
    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 2. items
# =============================================================================
class ItemBase(SQLModel):
    code: str = Field(..., min_length=1, max_length=30)
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=50)
    cost_price: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    selling_price: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    mrp: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    minimum_selling_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    rep_commission: Decimal = Field(Decimal("0"), ge=0, le=100, max_digits=5, decimal_places=2)
    unit_type: inv_models.UnitType = inv_models.UnitType.PCS
    unit_quantity: int = Field(1, ge=1)
    supplier_id: int
    category_id: int


class ItemCreate(ItemBase):
    pass


class ItemUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    sku: Optional[str] = None
    cost_price: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    mrp: Optional[Decimal] = Field(None, ge=0)
    minimum_selling_price: Optional[Decimal] = Field(None, ge=0)
    rep_commission: Optional[Decimal] = Field(None, ge=0, le=100)
    unit_type: Optional[inv_models.UnitType] = None
    unit_quantity: Optional[int] = Field(None, ge=1)
    supplier_id: Optional[int] = None
    category_id: Optional[int] = None


class ItemRead(ItemBase):
    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 3. stocks
# =============================================================================
class StockAdd(SQLModel):
    item_id: int
    location_id: int
    quantity: int = Field(..., gt=0)


class StockRead(SQLModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    supplier_name: Optional[str] = None
    location_id: int
    location_name: str
    quantity: int
    updated_at: datetime


# =============================================================================
# 4. stock transfers
# =============================================================================
class StockTransferItemCreate(SQLModel):
    item_id: int
    quantity: int = Field(..., gt=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0, description="defaults to the item's cost price")


class StockTransferCreate(SQLModel):
    source_location_id: int
    destination_location_id: int
    transfer_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[StockTransferItemCreate] = Field(..., min_length=1)


class StockTransferItemRead(SQLModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    supplier_name: Optional[str] = None
    requested_quantity: int
    shipped_quantity: int
    received_quantity: int
    unit_cost: Decimal
    total_cost: Decimal


class StockTransferRead(SQLModel):
    id: int
    transfer_number: str
    source_location_id: int
    destination_location_id: int
    transfer_date: date
    status: inv_models.TransferStatus
    total_items: int
    total_quantity: int
    total_value: Decimal
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    items: List[StockTransferItemRead] = []
