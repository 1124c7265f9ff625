"""Shared rate limiter and request logging."""

import logging
import time

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from donorlink.config import settings

logger = logging.getLogger("donorlink.access")

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def log_requests(request: Request, call_next):
    """Log method, path, status and latency of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response
