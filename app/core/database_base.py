# app/core/database_base.py

"""
Column helpers shared by the table models of every domain.

A Column object can only be attached to one table, so each helper builds a
fresh Field/Column pair per call.
"""

from datetime import datetime, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from sqlmodel import Field, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

TWO_PLACES = Decimal("0.01")


def utc_now() -> datetime:
    return datetime.now(UTC)


def created_at_field() -> Any:
    """Creation timestamp (timezone aware, defaulted on both sides)."""
    return Field(
        default_factory=utc_now,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
        description="record creation time",
    )


def updated_at_field() -> Any:
    """Last update timestamp, refreshed by the ORM on every UPDATE."""
    return Field(
        default_factory=utc_now,
        sa_column=Column(
            TIMESTAMP(timezone=True),
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        ),
        description="record last update time",
    )


def money(value: Any) -> Decimal:
    """Rounds an amount half-up to two decimal places."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def timestamp_field(*, default_now: bool = False) -> Any:
    """Timezone aware timestamp; NULL unless default_now is set."""
    if default_now:
        return Field(
            default_factory=utc_now,
            sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
        )
    return Field(default=None, sa_column=Column(TIMESTAMP(timezone=True), nullable=True))
