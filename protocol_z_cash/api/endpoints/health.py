from __future__ import annotations

from fastapi import APIRouter, Response
from jinja2 import TemplateError
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from starlette.responses import JSONResponse

from protocol_z_cash.api.templating import templates

router = APIRouter(tags=["health"])

PAGE_TEMPLATES = ("base.html", "partial.html", "index.html", "identifier.html")


@router.get("/health/live")
async def live():
    return {"status": "ok"}


@router.get("/health/ready")
def ready():
    """
    Readiness reflects ability to serve traffic: every page template must load.
    """
    problems: list[str] = []

    for name in PAGE_TEMPLATES:
        try:
            templates.get_template(name)
        except TemplateError as e:
            problems.append(f"template:{name} err={type(e).__name__}")

    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )

    return {"status": "ready"}


@router.get("/metrics", include_in_schema=False)
def scrape():
    # Never cached.
    return Response(
        generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-store"},
    )
