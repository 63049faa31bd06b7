from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from protocol_z_cash.api.observability.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION_SECONDS,
    normalize_path,
)

log = logging.getLogger("protocol_z_cash.request")

REQUEST_ID_HEADER = "X-Request-Id"


def _json_log(event: str, **fields):
    # Structured log in a single line.
    msg = {"event": event, **fields}
    log.info("%s", msg)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request ID + one structured log line and Prometheus sample per request.

    Adds:
      request.state.request_id
      response header: X-Request-Id
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid

        start = time.perf_counter()
        resp = await call_next(request)
        duration = time.perf_counter() - start

        resp.headers[REQUEST_ID_HEADER] = rid

        p = normalize_path(request.url.path)
        m = request.method.upper()
        HTTP_REQUESTS_TOTAL.labels(method=m, path=p, status=str(resp.status_code)).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=m, path=p).observe(duration)

        _json_log(
            "request",
            request_id=rid,
            method=request.method,
            path=request.url.path,
            status_code=resp.status_code,
            duration_ms=int(duration * 1000),
        )
        return resp
