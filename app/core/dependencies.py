# app/core/dependencies.py

"""
FastAPI dependencies used by the domain routers.

- Database session (get_db_session).
- Current user and role checks, re-exported from app.core.security.
"""

from typing import AsyncGenerator
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    oauth2_scheme,
    get_current_user_from_token,
    get_current_active_user,
    get_current_admin_user,
    get_current_staff_user,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session dependency for the routers.
    Wraps app.core.database.get_session so tests can override either one.
    """
    async for session in get_main_app_session():
        yield session
