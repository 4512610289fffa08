"""FastAPI middleware for request correlation and access logging."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import generate_request_id, set_request_id
from .logging_config import get_logger

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach an X-Request-ID to every request and log its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"{request.method} {request.url.path} failed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                },
                exc_info=True
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
        )
        response.headers["X-Request-ID"] = request_id
        return response
