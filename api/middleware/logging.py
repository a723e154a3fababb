"""
Logging Middleware

Request/response logging with a per-request correlation ID.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from config.logging_config import correlation_id

logger = logging.getLogger("rfp_manager.api.requests")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with method, path, status and duration.

    The correlation id is bound for the whole request, so service log lines
    written while handling it carry the same id. It is returned in
    X-Correlation-ID, together with X-Response-Time-Ms.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:8]
        token = correlation_id.set(request_id)
        request.state.correlation_id = request_id

        started = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} from {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"{request.method} {request.url.path} failed: {str(e)} ({elapsed_ms:.2f}ms)")
            raise
        finally:
            correlation_id.reset(token)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Correlation-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"

        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            level,
            f"{request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.2f}ms)"
        )
        return response
