# app/domains/usr/schemas.py

"""
Request/response models of the 'usr' domain.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, EmailStr

from . import models as usr_models


class UserBase(SQLModel):
    """Common user fields."""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr = Field(..., max_length=100)
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    role: usr_models.UserRole = Field(default=usr_models.UserRole.REPRESENTATIVE)
    business_id: Optional[int] = None
    is_active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class UserUpdate(SQLModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[usr_models.UserRole] = None
    business_id: Optional[int] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)


class UserRead(UserBase):
    """
    User as returned by the API. The password hash is never exposed.
    """
    id: int
    created_at: datetime
    updated_at: datetime


class UserSummary(SQLModel):
    """Compact user reference embedded in other responses."""
    id: int
    username: str
    full_name: Optional[str] = None
    role: usr_models.UserRole


class Token(BaseModel):
    access_token: str
    token_type: str


class LocationAccessCreate(SQLModel):
    location_id: int


class LocationAccessRead(SQLModel):
    id: int
    user_id: int
    location_id: int
    access_start: datetime
    access_end: Optional[datetime] = None
