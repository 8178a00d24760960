"""Per-client rate limiting with slowapi.

Every route shares the default limit from `settings.RATE_LIMIT`
(100 requests per 15 minutes per client address).
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.app.core.config import settings
from src.app.core.logging import get_logs_writer_logger

logger = get_logs_writer_logger()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded for %s: %s", get_remote_address(request), exc.detail)
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests from this IP, please try again later.",
            "code": "RATE_LIMITED",
            "detail": str(exc.detail),
        },
    )
