from __future__ import annotations

from prometheus_client import Counter, Histogram

# Paths served by fixed routes; any other single segment is an identifier.
_FIXED_PATHS = ("/", "/favicon.ico", "/metrics", "/health/live", "/health/ready")


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"

    if p in _FIXED_PATHS:
        return p
    if p.count("/") == 1:
        return "/:identifier"
    return "/:other"


HTTP_REQUESTS_TOTAL = Counter(
    "protocol_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "protocol_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

HOST_REDIRECTS_TOTAL = Counter(
    "protocol_host_redirects_total",
    "Requests redirected from the old domain",
)

IDENTIFIER_RESOLUTIONS_TOTAL = Counter(
    "protocol_identifier_resolutions_total",
    "Identifier page resolutions by matching rule",
    ["kind"],
)
