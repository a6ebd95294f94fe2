# app/core/middleware.py

"""
HTTP middleware: request/response logging and security headers.
"""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("app.request")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


def register_middleware(app: FastAPI) -> None:
    """Attaches the logging middleware to the application."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        client_ip = request.client.host if request.client else "-"
        user_agent = request.headers.get("user-agent", "-")
        logger.info("--> %s %s from %s (%s)", request.method, request.url, client_ip, user_agent)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info("<-- %s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        response.headers["X-Process-Time"] = f"{duration_ms:.1f}"
        return response
