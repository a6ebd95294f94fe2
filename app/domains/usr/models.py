# app/domains/usr/models.py

"""
ORM models of the 'usr' domain (users and their location access).

- users: login accounts with a role and an optional owning business.
- user_location_access: time-bounded grants of a user to a stock location.
"""

from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import IntEnum
from sqlmodel import Field, Relationship, SQLModel

from app.core.database_base import created_at_field, timestamp_field, updated_at_field

if TYPE_CHECKING:
    from app.domains.corp.models import Business
    from app.domains.loc.models import StockLocation


class UserRole(IntEnum):
    """
    User roles. Stored by name, compared by value (lower = more privileged).
    """
    ADMIN = 10              # full access, confirms orders
    OFFICE = 50             # back office: bills, stock, transfers
    REPRESENTATIVE = 80     # field sales: creates orders only


# =============================================================================
# 1. users
# =============================================================================
class UserBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="login name")
    email: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="login e-mail")
    password_hash: str = Field(max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: UserRole = Field(default=UserRole.REPRESENTATIVE)
    is_active: bool = Field(default=True)
    business_id: Optional[int] = Field(default=None, foreign_key="businesses.id", description="owning business (FK)")


class User(UserBase, table=True):
    __tablename__ = "users"

    created_at: Optional[datetime] = created_at_field()
    updated_at: Optional[datetime] = updated_at_field()

    business: Optional["Business"] = Relationship(
        back_populates="users",
        sa_relationship_kwargs={"lazy": "selectin"},
    )


# =============================================================================
# 2. user_location_access
# =============================================================================
class UserLocationAccess(SQLModel, table=True):
    """
    A grant is active while access_end is NULL.
    """
    __tablename__ = "user_location_access"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    location_id: int = Field(foreign_key="stock_locations.id", index=True)
    access_start: Optional[datetime] = timestamp_field(default_now=True)
    access_end: Optional[datetime] = timestamp_field()

    location: Optional["StockLocation"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
