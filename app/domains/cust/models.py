# app/domains/cust/models.py

"""
ORM models of the 'cust' domain: sales areas and customers.
"""

from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel

from app.core.database_base import created_at_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.usr.models import User


class CustomerType(str, Enum):
    RETAIL = "retail"
    ENTERPRISE = "enterprise"


class Area(SQLModel, table=True):
    __tablename__ = "areas"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, sa_column_kwargs={"unique": True})
    description: Optional[str] = Field(default=None)


class CustomerBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="CUST0001 style code")
    name: str = Field(max_length=100)
    shop_name: Optional[str] = Field(default=None, max_length=150)
    customer_type: CustomerType = Field(default=CustomerType.RETAIL)
    area_id: Optional[int] = Field(default=None, foreign_key="areas.id", index=True)
    address: Optional[str] = Field(default=None, max_length=255)
    contact_number: str = Field(max_length=30, sa_column_kwargs={"unique": True})
    assigned_rep_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    notes: Optional[str] = Field(default=None)


class Customer(CustomerBase, table=True):
    __tablename__ = "customers"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    area: Optional["Area"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    assigned_rep: Optional["User"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
