"""Custom FastAPI middleware."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from prep_tracker.core.context import bound_request_id, normalize_request_id

REQUEST_ID_HEADER = "X-Request-Id"

access_logger = logging.getLogger("prep_tracker.access")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the whole request, echo it back and log one access line."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = normalize_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        start = perf_counter()

        with bound_request_id(request_id):
            try:
                response = await call_next(request)
            except Exception:
                access_logger.exception("%s %s failed", request.method, request.url.path)
                raise
            access_logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (perf_counter() - start) * 1000,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
