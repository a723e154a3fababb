"""
Rate Limiting Middleware

Per-caller rate limits. Every route gets LIMIT_STANDARD; document
extraction and full compliance runs opt into tighter limits with
@limiter.limit(...).
"""

from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from config.settings import settings

LIMIT_STANDARD = "100/minute"
LIMIT_CHECK = "10/minute"
LIMIT_UPLOAD = "10/minute"


def get_identifier(request: Request) -> str:
    """Authenticated user id once the auth dependency has run, else client IP."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    default_limits=[LIMIT_STANDARD],
    enabled=settings.rate_limit_enabled
)


def setup_rate_limiting(app: FastAPI):
    """Attach the limiter; exceeded limits are answered 429."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
