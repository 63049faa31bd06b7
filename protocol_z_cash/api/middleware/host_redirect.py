from __future__ import annotations

import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from protocol_z_cash.api.observability.metrics import HOST_REDIRECTS_TOTAL

log = logging.getLogger("protocol_z_cash.redirect")

DEFAULT_OLD_HOST = "p.z.cash"
DEFAULT_NEW_HOST = "protocol.z.cash"


def build_redirect_location(new_host: str, path: str, query: str = "") -> str:
    """Swap scheme and authority for https://<new_host>, keeping path and query verbatim."""
    location = f"https://{new_host}{path}"
    if query:
        location = f"{location}?{query}"
    return location


def _raw_target(request: Request) -> tuple[str, str]:
    # Prefer the bytes as they arrived on the wire; the decoded path loses escapes.
    scope = request.scope
    raw_path = scope.get("raw_path")
    path = raw_path.decode("ascii") if raw_path else scope["path"]
    query = (scope.get("query_string") or b"").decode("ascii")
    return path, query


class HostRedirectMiddleware(BaseHTTPMiddleware):
    """
    Redirects every request addressed to the old domain onto the new one.

    Host == old_host:
      307 Temporary Redirect, Location: https://<new_host><path>[?query]
      the wrapped app is never called
    Otherwise:
      the request goes to the wrapped app untouched
    """

    def __init__(self, app, old_host: str = DEFAULT_OLD_HOST, new_host: str = DEFAULT_NEW_HOST):
        super().__init__(app)
        self.old_host = old_host
        self.new_host = new_host

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.headers.get("host") != self.old_host:
            return await call_next(request)

        try:
            path, query = _raw_target(request)
        except UnicodeDecodeError as e:
            log.error("Cannot build redirect target: %s host=%s", e, self.old_host)
            return PlainTextResponse("Internal Server Error", status_code=500)

        location = build_redirect_location(self.new_host, path, query)
        HOST_REDIRECTS_TOTAL.inc()
        log.info("redirect %s -> %s", self.old_host, location)
        # Location carries the raw target unchanged, with no re-quoting.
        return Response(status_code=307, headers={"location": location})
