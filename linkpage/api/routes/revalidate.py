"""
Cache Invalidation Routes.

`/api/revalidate` is called by the editor after a save;
`/api/webhooks/revalidate` receives data-store row-change events. Both
accept either body shape and share one gateway.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from linkpage.api.deps import get_gateway
from linkpage.components.cache import NO_STORE_POLICY, generate_cache_headers
from linkpage.components.revalidation import (
    SECRET_HEADER,
    RevalidateInput,
    RevalidationGateway,
    run,
)
from linkpage.domain.routes import REVALIDATE_PATH, WEBHOOK_REVALIDATE_PATH

router = APIRouter()


async def _handle(request: Request, gateway: RevalidationGateway) -> JSONResponse:
    input_data = RevalidateInput(
        provided_secret=request.headers.get(SECRET_HEADER),
        raw_body=await request.body(),
    )
    # Link events hit the data store; keep that off the event loop.
    result = await run_in_threadpool(run, input_data, gateway)
    return JSONResponse(
        content=result.to_body(),
        status_code=result.status_code,
        headers=generate_cache_headers(NO_STORE_POLICY),
    )


@router.post(REVALIDATE_PATH)
async def revalidate(
    request: Request, gateway: RevalidationGateway = Depends(get_gateway)
) -> JSONResponse:
    return await _handle(request, gateway)


@router.post(WEBHOOK_REVALIDATE_PATH)
async def revalidate_webhook(
    request: Request, gateway: RevalidationGateway = Depends(get_gateway)
) -> JSONResponse:
    return await _handle(request, gateway)
