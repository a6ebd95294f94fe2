# app/domains/corp/models.py

"""
ORM models of the 'corp' domain: the businesses that own locations and users.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel

from app.core.database_base import created_at_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.usr.models import User
    from app.domains.loc.models import StockLocation


class BusinessType(str, Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    DISTRIBUTOR = "distributor"
    MANUFACTURER = "manufacturer"


class BusinessBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="business name")
    business_type: BusinessType = Field(default=BusinessType.RETAIL)
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)


class Business(BusinessBase, table=True):
    __tablename__ = "businesses"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    users: List["User"] = Relationship(back_populates="business")
    locations: List["StockLocation"] = Relationship(back_populates="business")
