from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from fuelai.core.config import settings
from fuelai.core.security import read_token_subject
import logging

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER = 60

def get_rate_limit_key(request: Request) -> str:
    """
    Authenticated requests share one bucket per token subject, so a user
    switching networks keeps their budget. Anything else is keyed by address.
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        subject = read_token_subject(token.strip())
        if subject:
            return f"user:{subject}"
    return f"ip:{get_remote_address(request)}"

# In-memory storage; limits are per process
limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[settings.DEFAULT_RATE_LIMIT] if settings.RATE_LIMIT_ENABLED else [],
    enabled=settings.RATE_LIMIT_ENABLED
)

def _retry_after(exc: RateLimitExceeded) -> int:
    try:
        return int(exc.limit.limit.get_expiry())
    except AttributeError:
        return DEFAULT_RETRY_AFTER

def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same {"detail": ...} shape as every other API error."""
    key = get_rate_limit_key(request)
    retry_after = _retry_after(exc)
    logger.warning(f"Rate limit exceeded for {key} on {request.method} {request.url.path}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": f"Too many requests. Retry in {retry_after} seconds."},
        headers={"Retry-After": str(retry_after)}
    )

def create_rate_limit_middleware():
    if not settings.RATE_LIMIT_ENABLED:
        logger.info("Rate limiting is disabled in settings")
        return None
    return SlowAPIMiddleware
