# app/domains/bill/schemas.py

"""
Request/response models of the 'bill' domain.
"""

from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from sqlmodel import SQLModel, Field
from pydantic import model_validator

from . import models as bill_models


class _ItemReference(SQLModel):
    """An item line names its item by id or by code."""
    item_id: Optional[int] = None
    item_code: Optional[str] = None

    @model_validator(mode="after")
    def check_item_reference(self):
        if self.item_id is None and not self.item_code:
            raise ValueError("item_id or item_code is required")
        return self


# =============================================================================
# 1. supplier bills
# =============================================================================
class SupplierBillItemCreate(_ItemReference):
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(..., gt=0)
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    free_item_quantity: int = Field(0, ge=0)


class SupplierBillCreate(SQLModel):
    bill_number: str = Field(..., min_length=1, max_length=50)
    supplier_id: int
    location_id: Optional[int] = Field(None, description="defaults to the main location of the user's business")
    billing_date: Optional[date] = None
    received_date: Optional[date] = None
    extra_discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    notes: Optional[str] = None
    items: List[SupplierBillItemCreate] = Field(..., min_length=1)


class SupplierBillItemRead(SQLModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    unit_price: Decimal
    quantity: int
    discount_percentage: Decimal
    free_item_quantity: int
    amount: Decimal


class SupplierBillRead(SQLModel):
    id: int
    bill_number: str
    supplier_id: int
    location_id: int
    billing_date: date
    received_date: Optional[date] = None
    extra_discount_percentage: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    final_total: Decimal
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    items: List[SupplierBillItemRead] = []


# =============================================================================
# 2. customer bills
# =============================================================================
class CustomerBillItemCreate(_ItemReference):
    quantity: int = Field(..., gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0, description="defaults to the item's selling price")
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    free_quantity: int = Field(0, ge=0)
    notes: Optional[str] = None


class CustomerBillCreate(SQLModel):
    customer_id: int
    billing_date: Optional[date] = None
    payment_method: bill_models.PaymentMethod = bill_models.PaymentMethod.CASH
    status: Optional[bill_models.BillStatus] = Field(None, description="invoices only; orders always start pending")
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    discount_amount: Optional[Decimal] = Field(None, ge=0, description="overrides the percentage when given")
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None
    reference_no: Optional[str] = Field(None, max_length=50)
    location_id: Optional[int] = None
    items: List[CustomerBillItemCreate] = Field(..., min_length=1)


class CustomerBillItemRead(SQLModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    category_name: Optional[str] = None
    unit_price: Decimal
    quantity: int
    unit_type: Optional[str] = None
    discount_percentage: Decimal
    discount_amount: Decimal
    free_quantity: int
    subtotal: Decimal
    total_amount: Decimal
    notes: Optional[str] = None


class CustomerBillRead(SQLModel):
    id: int
    invoice_no: str
    customer_id: int
    billing_date: date
    payment_method: bill_models.PaymentMethod
    status: bill_models.BillStatus
    is_order: bool
    order_status: Optional[bill_models.OrderStatus] = None
    order_confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[int] = None
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    balance_amount: Decimal
    total_items: int
    total_quantity: int
    notes: Optional[str] = None
    reference_no: Optional[str] = None
    created_by: Optional[int] = None
    location_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    items: List[CustomerBillItemRead] = []


class PaymentCreate(SQLModel):
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    payment_method: Optional[bill_models.PaymentMethod] = None
    notes: Optional[str] = None


# =============================================================================
# 3. orders and customer summaries
# =============================================================================
class CustomerSummary(SQLModel):
    customer_id: int
    due_amount: Decimal = Decimal("0")
    pending_bills_count: int = 0
    over_45_days_amount: Decimal = Decimal("0")
    last_billing_date: Optional[date] = None


class OrderDetail(CustomerBillRead):
    customer_name: Optional[str] = None
    customer_summary: CustomerSummary


class FrontendValidationResult(SQLModel):
    valid: bool
    errors: List[str] = []
