# app/domains/ven/models.py

"""
ORM models of the 'ven' domain: the suppliers goods are bought from.
"""

from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel

from app.core.database_base import created_at_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.inv.models import Category


class SupplierBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(min_length=2, max_length=12, sa_column_kwargs={"unique": True}, description="supplier code")
    name: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="supplier name")
    notes: Optional[str] = Field(default=None)
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30, sa_column_kwargs={"unique": True})
    contact_person: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    credit_days: int = Field(default=0, ge=0, description="payment term in days")
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", description="supplier category (FK)")


class Supplier(SupplierBase, table=True):
    __tablename__ = "suppliers"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    category: Optional["Category"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
