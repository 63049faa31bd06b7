from __future__ import annotations

import logging
import traceback
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from protocol_z_cash.api.middleware.request_context import REQUEST_ID_HEADER

log = logging.getLogger("protocol_z_cash.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    - Never return stack traces to clients
    - Echo the request id if one is known
    - Log traceback server-side
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid = getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER)
            log.error(
                "Unhandled error: %s rid=%s path=%s\n%s",
                str(e),
                rid,
                request.url.path,
                traceback.format_exc(),
            )
            resp = PlainTextResponse("Internal Server Error", status_code=500)
            if rid:
                resp.headers[REQUEST_ID_HEADER] = rid
            return resp
