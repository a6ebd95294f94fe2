# app/domains/inv/models.py

"""
ORM models of the 'inv' domain.

- categories / items: the item master.
- stocks: quantity of an item held at a location (one row per pair, never negative).
- stock_transfers / stock_transfer_items: completed movements between locations,
  with item details snapshotted at transfer time.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel
from sqlalchemy import CheckConstraint, UniqueConstraint

from app.core.database_base import created_at_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.ven.models import Supplier
    from app.domains.loc.models import StockLocation


class CategoryType(str, Enum):
    PRODUCT = "product"
    RAW_MATERIAL = "raw_material"
    CONSUMABLE = "consumable"


class UnitType(str, Enum):
    PCS = "pcs"
    BOX = "box"
    PACK = "pack"
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    DOZEN = "dozen"


class TransferStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# =============================================================================
# 1. categories
# =============================================================================
class CategoryBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True})
    name: str = Field(max_length=100)
    category_type: CategoryType = Field(default=CategoryType.PRODUCT)


class Category(CategoryBase, table=True):
    __tablename__ = "categories"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()


# =============================================================================
# 2. items
# =============================================================================
class ItemBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=30, sa_column_kwargs={"unique": True}, description="item code")
    name: str = Field(max_length=150)
    description: Optional[str] = Field(default=None)
    sku: Optional[str] = Field(default=None, max_length=50)
    cost_price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    selling_price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    mrp: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2, description="maximum retail price")
    minimum_selling_price: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    rep_commission: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2, description="percentage")
    unit_type: UnitType = Field(default=UnitType.PCS)
    unit_quantity: int = Field(default=1, ge=1)
    supplier_id: int = Field(foreign_key="suppliers.id", index=True)
    category_id: int = Field(foreign_key="categories.id", index=True)


class Item(ItemBase, table=True):
    __tablename__ = "items"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    supplier: Optional["Supplier"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    category: Optional["Category"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 3. stocks
# =============================================================================
class Stock(SQLModel, table=True):
    __tablename__ = "stocks"
    __table_args__ = (
        UniqueConstraint("item_id", "location_id", name="uq_stocks_item_location"),
        CheckConstraint("quantity >= 0", name="ck_stocks_quantity_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    location_id: int = Field(foreign_key="stock_locations.id", index=True)
    quantity: int = Field(default=0)

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    item: Optional["Item"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    location: Optional["StockLocation"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 4. stock_transfers
# =============================================================================
class StockTransfer(SQLModel, table=True):
    __tablename__ = "stock_transfers"

    id: Optional[int] = Field(default=None, primary_key=True)
    transfer_number: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="ST-YYYYMMDD-NNN")
    source_location_id: int = Field(foreign_key="stock_locations.id", index=True)
    destination_location_id: int = Field(foreign_key="stock_locations.id", index=True)
    transfer_date: date = Field(default_factory=date.today)
    status: TransferStatus = Field(default=TransferStatus.DRAFT)
    total_items: int = Field(default=0)
    total_quantity: int = Field(default=0)
    total_value: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    notes: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None, foreign_key="users.id")

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    items: List["StockTransferItem"] = Relationship(
        back_populates="transfer",
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan"},
    )


class StockTransferItem(SQLModel, table=True):
    __tablename__ = "stock_transfer_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    transfer_id: int = Field(foreign_key="stock_transfers.id", index=True)
    item_id: int = Field(foreign_key="items.id")
    item_code: str = Field(max_length=30)
    item_name: str = Field(max_length=150)
    supplier_name: Optional[str] = Field(default=None, max_length=100)
    requested_quantity: int = Field(default=0)
    shipped_quantity: int = Field(default=0)
    received_quantity: int = Field(default=0)
    unit_cost: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    total_cost: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)

    transfer: Optional["StockTransfer"] = Relationship(back_populates="items")
