"""Request Metrics — feeds the Prometheus counters for every HTTP request."""

import time

from fastapi import FastAPI, Request

from payments_api.infrastructure.metrics import observe_request


def register_request_metrics(app: FastAPI) -> None:
    @app.middleware("http")
    async def measure_request(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route = getattr(request.scope.get("route"), "path", "unmatched")
            observe_request(
                request.method, route, status_code, time.perf_counter() - start,
            )
