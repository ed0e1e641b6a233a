"""Inbound webhook endpoint relayed to Discord."""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from relay.controllers.dependencies import ForwarderDep
from relay.services.forwarder import WebhookRequest

router = APIRouter(tags=["webhook"])

# Every method is routed here so the forwarder, not the router, answers 405.
_ACCEPTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(
    "/api/webhook",
    methods=_ACCEPTED_METHODS,
    response_class=PlainTextResponse,
    include_in_schema=False,
)
@router.api_route(
    "/webhook",
    methods=_ACCEPTED_METHODS,
    response_class=PlainTextResponse,
)
async def relay_webhook(
    request: Request,
    forwarder: ForwarderDep,
    account: Optional[str] = None,
) -> PlainTextResponse:
    """Forward the raw body to the account's Discord webhook and log the message."""

    result = await forwarder.handle(
        WebhookRequest(
            method=request.method,
            account=account,
            body=await request.body(),
            content_type=request.headers.get("content-type"),
        )
    )
    return PlainTextResponse(result.message, status_code=result.status_code)
