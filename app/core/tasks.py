# app/core/tasks.py

"""
ARQ worker tasks.

Run the worker with:
    arq app.core.tasks.WorkerSettings
"""

import logging

from arq import cron
from arq.connections import RedisSettings
from sqlmodel import select

from app.core.config import settings
from app.core.database import get_async_session_context

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx) -> dict:
    """
    Periodic database health check executed by the ARQ worker.
    Runs a trivial query and reports the connection state.
    """
    try:
        async with get_async_session_context() as db:
            result = await db.exec(select(1))
            if result.first() == 1:
                logger.info("Database health check: connection successful.")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.error(error_msg)
            return {"status": "failed", "message": error_msg}
    except Exception as e:
        error_msg = f"Database connection error: {e}"
        logger.error("Database health check failed: %s", error_msg)
        return {"status": "failed", "message": error_msg}


def redis_settings() -> RedisSettings:
    return RedisSettings(host=settings.REDIS_HOST or "localhost", port=settings.REDIS_PORT)


class WorkerSettings:
    redis_settings = redis_settings()
    functions = [health_check_database_task]
    cron_jobs = [
        cron(health_check_database_task, hour=0, minute=0, timeout=300, keep_result=600),
    ]
