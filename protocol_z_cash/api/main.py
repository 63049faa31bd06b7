from __future__ import annotations

import os

from fastapi import FastAPI

from protocol_z_cash import __version__
from protocol_z_cash.api.endpoints import health, pages
from protocol_z_cash.api.middleware.error_shaping import SafeErrorMiddleware
from protocol_z_cash.api.middleware.host_redirect import (
    DEFAULT_NEW_HOST,
    DEFAULT_OLD_HOST,
    HostRedirectMiddleware,
)
from protocol_z_cash.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="Zcash Protocol Identifiers",
    version=__version__,
    docs_url=None,
    redoc_url=None,
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
# Runtime order (outermost -> innermost):
#   SafeErrorMiddleware -> HostRedirect -> RequestContext -> handler
# ------------------------------------------------------------

# Request context (request_id + request log + metrics)
app.add_middleware(RequestContextMiddleware)

# Old-domain redirect runs before any routing
old_host = (os.getenv("PROTOCOL_OLD_DOMAIN") or DEFAULT_OLD_HOST).strip()
new_host = (os.getenv("PROTOCOL_NEW_DOMAIN") or DEFAULT_NEW_HOST).strip()
app.add_middleware(HostRedirectMiddleware, old_host=old_host, new_host=new_host)

app.add_middleware(SafeErrorMiddleware)

# Fixed paths first; the identifier route captures any other single segment.
app.include_router(health.router)
app.include_router(pages.router)
