"""Request logging middleware"""

import logging
import time
from fastapi import Request

logger = logging.getLogger("src.api.access")

SKIP_PATHS = ("/healthz", "/docs", "/openapi.json", "/favicon.ico")


async def log_request_middleware(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    if request.url.path.startswith(SKIP_PATHS):
        return await call_next(request)

    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = int((time.perf_counter() - start_time) * 1000)

    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms) "
        f"owner={request.headers.get('x-owner-id', '-')}"
    )
    return response
