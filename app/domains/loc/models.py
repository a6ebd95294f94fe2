# app/domains/loc/models.py

"""
ORM models of the 'loc' domain.

A stock location is a warehouse or outlet of a business. Locations can be
nested through parent_location_id, and every business keeps exactly one
location flagged is_main.
"""

from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, Integer

from app.core.database_base import created_at_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.corp.models import Business


class StockLocationBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="location code")
    name: str = Field(max_length=100, description="location name")
    is_main: bool = Field(default=False, description="main location of the business")
    business_id: int = Field(foreign_key="businesses.id", index=True, description="owning business (FK)")
    parent_location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("stock_locations.id", ondelete="RESTRICT")),
        description="parent location (FK, self reference)"
    )
    responsible_user_id: Optional[int] = Field(default=None, foreign_key="users.id", description="person in charge (FK)")


class StockLocation(StockLocationBase, table=True):
    __tablename__ = "stock_locations"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    business: Optional["Business"] = Relationship(back_populates="locations")
