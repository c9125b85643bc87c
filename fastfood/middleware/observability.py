from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from fastfood.core.metrics import request_metrics
from fastfood.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        status_code = 500
        endpoint = request.url.path
        method = request.method
        response = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            route = request.scope.get("route")
            # metrics are keyed by route template so /orders/1 and /orders/2 share a bucket
            metric_endpoint = getattr(route, "path", None) or endpoint
            request_metrics.observe(
                endpoint=metric_endpoint, method=method, status_code=status_code, duration_ms=duration_ms
            )

            logger.info(
                "request completed",
                extra={
                    "request_id": request_id,
                    "order_id": _extract_order_id(request),
                    "endpoint": endpoint,
                    "method": method,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            clear_request_context()


def _extract_order_id(request: Request) -> str | None:
    order_id = request.path_params.get("order_id")
    if order_id:
        return str(order_id)
    return None
