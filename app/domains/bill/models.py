# app/domains/bill/models.py

"""
ORM models of the 'bill' domain.

- supplier_bills / supplier_bill_items: goods received from a supplier into a location.
- customer_bills / customer_bill_items: goods sold to a customer. A bill created by a
  representative is an order (is_order) that waits for admin confirmation before
  stock is deducted.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel
from sqlalchemy import UniqueConstraint

from app.core.database_base import created_at_field, timestamp_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.ven.models import Supplier
    from app.domains.cust.models import Customer


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"


class BillStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    CANCELLED = "cancelled"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKING = "checking"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# =============================================================================
# 1. supplier_bills
# =============================================================================
class SupplierBill(SQLModel, table=True):
    __tablename__ = "supplier_bills"
    __table_args__ = (
        UniqueConstraint("supplier_id", "bill_number", name="uq_supplier_bills_supplier_number"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    bill_number: str = Field(max_length=50)
    supplier_id: int = Field(foreign_key="suppliers.id", index=True)
    location_id: int = Field(foreign_key="stock_locations.id", index=True, description="where the goods were received")
    billing_date: date = Field(default_factory=date.today)
    received_date: Optional[date] = Field(default=None)
    extra_discount_percentage: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    subtotal: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    final_total: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    notes: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None, foreign_key="users.id")

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    supplier: Optional["Supplier"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    items: List["SupplierBillItem"] = Relationship(
        back_populates="bill",
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan"},
    )


class SupplierBillItem(SQLModel, table=True):
    __tablename__ = "supplier_bill_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    bill_id: int = Field(foreign_key="supplier_bills.id", index=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    item_code: str = Field(max_length=30)
    item_name: str = Field(max_length=150)
    unit_price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    quantity: int = Field(default=0)
    discount_percentage: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    free_item_quantity: int = Field(default=0)
    amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)

    bill: Optional["SupplierBill"] = Relationship(back_populates="items")


# =============================================================================
# 2. customer_bills
# =============================================================================
class CustomerBill(SQLModel, table=True):
    __tablename__ = "customer_bills"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_no: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="INV-YYMMNNNN / ORD-YYMMNNNN")
    customer_id: int = Field(foreign_key="customers.id", index=True)
    billing_date: date = Field(default_factory=date.today)
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    status: BillStatus = Field(default=BillStatus.DRAFT)

    is_order: bool = Field(default=False)
    order_status: Optional[OrderStatus] = Field(default=None)
    order_confirmed_at: Optional[datetime] = timestamp_field()
    confirmed_by: Optional[int] = Field(default=None, foreign_key="users.id")

    subtotal: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    discount_percentage: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    tax_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    balance_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    total_items: int = Field(default=0)
    total_quantity: int = Field(default=0)

    notes: Optional[str] = Field(default=None)
    reference_no: Optional[str] = Field(default=None, max_length=50)
    created_by: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    location_id: Optional[int] = Field(default=None, foreign_key="stock_locations.id")

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    customer: Optional["Customer"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    items: List["CustomerBillItem"] = Relationship(
        back_populates="bill",
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan"},
    )


class CustomerBillItem(SQLModel, table=True):
    __tablename__ = "customer_bill_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    bill_id: int = Field(foreign_key="customer_bills.id", index=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    item_code: str = Field(max_length=30)
    item_name: str = Field(max_length=150)
    category_name: Optional[str] = Field(default=None, max_length=100)
    unit_price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    quantity: int = Field(default=0)
    unit_type: Optional[str] = Field(default=None, max_length=10)
    discount_percentage: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    free_quantity: int = Field(default=0)
    subtotal: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    notes: Optional[str] = Field(default=None)

    bill: Optional["CustomerBill"] = Relationship(back_populates="items")
