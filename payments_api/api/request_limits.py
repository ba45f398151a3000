"""Request Limits — per-client rate limiting and a per-request timeout.

Invariants:
    - A client over its rate gets 429 with Retry-After; the request never
      reaches a route
    - A request still running after the timeout is cancelled and answered with 504,
      unless its response has already started
    - Bodies follow the error handlers: {} unless error details are enabled
"""

import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from payments_api.core.errors import PaymentsError, RateLimitExceeded, RequestTimeout
from payments_api.core.rate_limit import Rate, TokenBucket

logger = logging.getLogger(__name__)


def _error_response(err: PaymentsError, expose_details: bool, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=err.http_status,
        content=err.to_response() if expose_details else {},
        headers=headers,
    )


def register_rate_limit(app: FastAPI, rate: Rate, expose_details: bool = False) -> None:
    """Attach a token-bucket limiter keyed by client address."""
    buckets: dict[str, TokenBucket] = {}

    @app.middleware("http")
    async def limit_rate(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        bucket = buckets.get(client)
        if bucket is None:
            bucket = buckets[client] = TokenBucket(rate)
        if not bucket.try_acquire():
            err = RateLimitExceeded(rate.limit, rate.period_seconds, bucket.retry_after())
            logger.info(
                f"{err.code}: {client} on {request.url.path}",
                extra={"error_code": err.code, "path": request.url.path},
            )
            return _error_response(err, expose_details, headers={
                "Retry-After": str(err.retry_after),
                "X-RateLimit-Limit": str(rate.limit),
                "X-RateLimit-Remaining": "0",
            })
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(rate.limit)
        response.headers["X-RateLimit-Remaining"] = str(bucket.remaining)
        return response


class RequestTimeoutMiddleware:
    """Cancel HTTP requests that run longer than timeout seconds."""

    def __init__(self, app: ASGIApp, timeout: float, expose_details: bool = False):
        self.app = app
        self.timeout = timeout
        self.expose_details = expose_details

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracking(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_tracking), self.timeout,
            )
        except asyncio.TimeoutError:
            if started:
                raise
            err = RequestTimeout(self.timeout)
            logger.warning(
                f"{err.code}: {scope['method']} {scope['path']} after {self.timeout:g}s",
                extra={"error_code": err.code, "path": scope["path"]},
            )
            response = _error_response(err, self.expose_details)
            await response(scope, receive, send)
