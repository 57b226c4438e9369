"""Access log middleware: one line per request with status and duration."""
import logging
import time
from starlette.requests import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.helpers import get_client_ip

logger = logging.getLogger("app.middleware.access")

# Noisy endpoints polled by load balancers
QUIET_PATHS = {"/health"}


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(f"{request.method} {request.url.path} failed after {elapsed_ms:.1f}ms")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        if request.url.path not in QUIET_PATHS:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f}ms, ip={get_client_ip(request)})",
            )
        response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"
        return response
