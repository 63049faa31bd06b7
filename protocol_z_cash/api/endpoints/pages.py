from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from protocol_z_cash.api.observability.metrics import IDENTIFIER_RESOLUTIONS_TOTAL
from protocol_z_cash.api.templating import templates
from protocol_z_cash.core.params import empty_string_as_true
from protocol_z_cash.core.spec import classify, get_location

router = APIRouter(tags=["pages"])


def partial_flag(partial: Optional[str] = Query(None)) -> bool:
    """`?partial` decoding: absent or empty means True, otherwise strict true/false."""
    try:
        return empty_string_as_true(partial)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Failed to deserialize query string: partial: {e}")


@router.get("/", include_in_schema=False)
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/favicon.ico", include_in_schema=False)
async def favicon():
    # No icon is served.
    return Response(status_code=204)


def single_segment(request: Request) -> None:
    """
    The identifier is exactly one path segment. An escaped "%2F" belongs to it;
    a literal "/" on the wire starts another segment, which is not routed.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        extra = "/" in request.scope["path"][1:]
    else:
        extra = b"/" in raw_path[1:]
    if extra:
        raise HTTPException(status_code=404, detail="Not Found")


# `:path` because routing matches the decoded path, where "%2F" is already "/".
@router.get("/{identifier:path}", include_in_schema=False, dependencies=[Depends(single_segment)])
async def identifier_page(request: Request, identifier: str, partial: bool = Depends(partial_flag)):
    spec_source = get_location(identifier)
    IDENTIFIER_RESOLUTIONS_TOTAL.labels(kind=classify(identifier)).inc()

    return templates.TemplateResponse(
        request,
        "identifier.html",
        {
            "identifier": identifier,
            "partial": partial,
            "spec_source": spec_source,
        },
    )
