import asyncio

from fastapi.testclient import TestClient
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from protocol_z_cash.api.middleware.host_redirect import HostRedirectMiddleware, build_redirect_location


def _counting_app():
    calls = []

    async def endpoint(request):
        calls.append(request.url.path)
        return PlainTextResponse("inner body", status_code=418, headers={"X-Inner": "1"})

    inner = Starlette(routes=[Route("/{rest:path}", endpoint)])
    return inner, HostRedirectMiddleware(inner), calls


def test_build_redirect_location():
    assert build_redirect_location("protocol.z.cash", "/TCR:1.2.3", "partial=") == (
        "https://protocol.z.cash/TCR:1.2.3?partial="
    )
    assert build_redirect_location("protocol.z.cash", "/", "") == "https://protocol.z.cash/"


def test_old_host_redirects_with_path_and_query(old_host_client):
    r = old_host_client.get("/TCR:1.2.3?partial=")
    assert r.status_code == 307
    assert r.headers["location"] == "https://protocol.z.cash/TCR:1.2.3?partial="


def test_old_host_redirects_landing_page(old_host_client):
    r = old_host_client.get("/")
    assert r.status_code == 307
    assert r.headers["location"] == "https://protocol.z.cash/"


def test_old_host_redirect_keeps_escaped_path(old_host_client):
    r = old_host_client.get("/zip-200%3Aabstract")
    assert r.status_code == 307
    assert r.headers["location"] == "https://protocol.z.cash/zip-200%3Aabstract"


def test_old_host_redirect_applies_to_every_method(old_host_client):
    r = old_host_client.post("/anything", content=b"ignored")
    assert r.status_code == 307
    assert r.headers["location"] == "https://protocol.z.cash/anything"


def test_redirect_never_invokes_wrapped_app():
    _, wrapped, calls = _counting_app()
    c = TestClient(wrapped, base_url="http://p.z.cash", follow_redirects=False)

    r = c.get("/TCR:1.2.3?partial=")
    assert r.status_code == 307
    assert calls == []


def test_other_hosts_pass_through_unchanged():
    inner, wrapped, calls = _counting_app()

    direct = TestClient(inner).get("/TCR:1.2.3?partial=")
    calls.clear()

    r = TestClient(wrapped).get("/TCR:1.2.3?partial=")
    assert calls == ["/TCR:1.2.3"]
    assert r.status_code == direct.status_code == 418
    assert r.content == direct.content == b"inner body"
    assert dict(r.headers) == dict(direct.headers)


def test_matching_is_exact_on_host_header():
    _, wrapped, calls = _counting_app()
    for base in ("http://p.z.cash:8080", "http://www.p.z.cash", "http://protocol.z.cash"):
        r = TestClient(wrapped, base_url=base, follow_redirects=False).get("/x")
        assert r.status_code == 418
    assert len(calls) == 3


def _call_raw(app, *, method="GET", path, raw_path, query_string=b"", host=b"p.z.cash", body=b""):
    """Drive the app with a hand-built ASGI scope; returns (response messages, receive call count)."""
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": raw_path,
        "query_string": query_string,
        "root_path": "",
        "headers": [(b"host", host), (b"content-length", str(len(body)).encode())],
        "client": ("testclient", 50000),
        "server": (host.decode(), 80),
    }
    messages = []
    receives = []

    async def receive():
        receives.append(1)
        return {"type": "http.request", "body": body, "more_body": False}

    async def send(message):
        messages.append(message)

    asyncio.run(app(scope, receive, send))
    return messages, len(receives)


def _location(start_message):
    return dict(start_message["headers"])[b"location"].decode()


def test_non_ascii_raw_path_is_an_internal_error():
    _, wrapped, calls = _counting_app()

    messages, _ = _call_raw(wrapped, path="/ÿ", raw_path=b"/\xff")

    assert messages[0]["type"] == "http.response.start"
    assert messages[0]["status"] == 500
    assert calls == []


def test_redirect_copies_path_and_query_verbatim():
    _, wrapped, calls = _counting_app()

    messages, _ = _call_raw(
        wrapped,
        path="/zip-32:a|b",
        raw_path=b"/zip-32:a|b",
        query_string=b"x=a|b&y={1}",
    )

    assert messages[0]["status"] == 307
    assert _location(messages[0]) == "https://protocol.z.cash/zip-32:a|b?x=a|b&y={1}"
    assert calls == []


def test_redirect_never_reads_request_body():
    _, wrapped, calls = _counting_app()

    messages, receive_calls = _call_raw(
        wrapped,
        method="POST",
        path="/anything",
        raw_path=b"/anything",
        body=b"payload that must stay unread",
    )

    assert messages[0]["status"] == 307
    assert _location(messages[0]) == "https://protocol.z.cash/anything"
    assert receive_calls == 0
    assert calls == []
