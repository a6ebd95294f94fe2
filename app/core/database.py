# app/core/database.py

"""
Database connection and session management.

- Builds the async SQLModel/SQLAlchemy engine from settings.
- Provides the session dependency used by the routers.
- Provides a standalone session context for ARQ tasks and scripts.
- Creates the tables at startup when AUTO_CREATE_TABLES is enabled.
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import configure_mappers, sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

# =============================================================================
# Import every domain model so that SQLModel.metadata knows all tables and
# the string-based relationships between domains can be resolved.
# =============================================================================
from app.domains.usr import models      # noqa
from app.domains.corp import models     # noqa
from app.domains.loc import models      # noqa
from app.domains.ven import models      # noqa
from app.domains.inv import models      # noqa
from app.domains.cust import models     # noqa
from app.domains.bill import models     # noqa

logger = logging.getLogger(__name__)

_database_url = settings.DATABASE_URL.get_secret_value()

# sqlite (used by the test suite) does not take queue pool sizing arguments
_engine_options = {}
if not _database_url.startswith("sqlite"):
    _engine_options = {
        "pool_recycle": 3600,
        "pool_size": 10,
        "max_overflow": 20,
    }

engine: AsyncEngine = create_async_engine(
    _database_url,
    echo=settings.DEBUG_MODE,
    future=True,
    **_engine_options,
)

AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata

_mappers_configured = False


# =============================================================================
# Table creation
# =============================================================================
async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """
    Creates every table registered on SQLModel.metadata.
    Existing tables are left untouched.
    """
    global _mappers_configured

    if not _mappers_configured:
        configure_mappers()
        _mappers_configured = True

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created (or already present).")


# =============================================================================
# Session dependencies
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async session dependency for FastAPI.
    A new session is opened per request and closed afterwards.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Standalone session for ARQ tasks and CLI scripts.
    Commits on success and rolls back when the block raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
