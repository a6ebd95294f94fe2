# app/main.py

"""
FastAPI application: lifespan, middleware, exception handlers and the
domain routers, all mounted under API_PREFIX.
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from app import API_PREFIX
from app.core.config import settings
from app.core.database import engine, get_session, create_db_and_tables
from app.core.exceptions import register_exception_handlers
from app.core.middleware import register_middleware
from app.core.tasks import redis_settings

from app.domains.usr.routers import router as usr_router
from app.domains.corp.routers import router as corp_router
from app.domains.loc.routers import router as loc_router
from app.domains.ven.routers import router as ven_router
from app.domains.inv.routers import router as inv_router
from app.domains.cust.routers import router as cust_router
from app.domains.bill.routers import router as bill_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- application lifespan --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Creates the tables when AUTO_CREATE_TABLES is set, opens the ARQ Redis
    pool when REDIS_HOST is configured, and releases both on shutdown.
    """
    logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
    app.state.redis = None
    if settings.AUTO_CREATE_TABLES:
        await create_db_and_tables()
        logger.info("Database tables checked/created.")
    if settings.REDIS_HOST:
        app.state.redis = await create_pool(redis_settings())
        logger.info("ARQ Redis pool connected to %s:%s", settings.REDIS_HOST, settings.REDIS_PORT)

    yield

    logger.info("Shutting down %s", settings.APP_NAME)
    if app.state.redis is not None:
        await app.state.redis.close()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    debug=settings.DEBUG_MODE,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_middleware(app)
register_exception_handlers(app)

# -- domain routers --
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["Users & Authentication"])
app.include_router(corp_router, prefix=f"{API_PREFIX}/corp", tags=["Businesses"])
app.include_router(loc_router, prefix=f"{API_PREFIX}/loc", tags=["Stock Locations"])
app.include_router(ven_router, prefix=f"{API_PREFIX}/ven", tags=["Suppliers"])
app.include_router(inv_router, prefix=f"{API_PREFIX}/inv", tags=["Inventory"])
app.include_router(cust_router, prefix=f"{API_PREFIX}/cust", tags=["Customers"])
app.include_router(bill_router, prefix=f"{API_PREFIX}/bill", tags=["Billing"])


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Runs a trivial query to check the database connection.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.error("Health check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )
