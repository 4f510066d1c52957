"""
Public Page Routes - `/` and `/{slug}`.

Mounted last: `/{slug}` would otherwise shadow every single-segment route.

Key behaviors:
- 200 with the rendered HTML and the full security/edge-cache header set
- 404 "Not Found" for unknown and reserved slugs alike
- 500 "Internal Server Error" for dangling templates and store failures
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from linkpage.api.deps import get_resolver
from linkpage.api.responses import plain_error
from linkpage.components.public_page import (
    HOMEPAGE,
    PublicPageResolver,
    RenderedPage,
    ResolveInput,
    ResolveResult,
    run,
)
from linkpage.domain.routes import HOMEPAGE_PATH, PUBLIC_PAGE_PATH

router = APIRouter()


def to_response(result: ResolveResult) -> Response:
    if isinstance(result, RenderedPage):
        return Response(content=result.html, status_code=200, headers=result.headers)
    return plain_error(result.status_code)


@router.get(HOMEPAGE_PATH, response_class=HTMLResponse)
def homepage(resolver: PublicPageResolver = Depends(get_resolver)) -> Response:
    return to_response(run(ResolveInput(identifier=HOMEPAGE), resolver))


@router.get(PUBLIC_PAGE_PATH, response_class=HTMLResponse)
def public_page(slug: str, resolver: PublicPageResolver = Depends(get_resolver)) -> Response:
    return to_response(run(ResolveInput(identifier=slug), resolver))
