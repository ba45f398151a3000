"""Request Logging — one structured access-log record per HTTP request.

Invariants:
    - Every request is logged exactly once, after the response status is known
    - 5xx responses are logged at ERROR, everything else at INFO
    - A request that raises is logged as status 500 before the error propagates
"""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("payments_api.http")


def register_request_logging(app: FastAPI) -> None:
    """Attach the access-log middleware to the app."""

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 3)
            level = logging.ERROR if status_code >= 500 else logging.INFO
            logger.log(
                level,
                f"{request.method} {request.url.path} {status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": status_code,
                    "duration_ms": duration_ms,
                },
            )
