"""Function-platform entry points.

``handler`` receives the proxy event shape used by Lambda-style runtimes
(``httpMethod``, ``queryStringParameters``, ``headers``, ``body``,
``isBase64Encoded``) and returns ``{"statusCode": ..., "body": ...}``.
``cleanup_handler`` is meant for a scheduled trigger so retention does not
depend on inbound traffic alone.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Mapping, Optional

from relay.config.settings import settings
from relay.database import session_scope
from relay.infrastructure.persistence.repositories_sqlalchemy import (
    SQLAlchemyLogEntryRepository,
)
from relay.services.discord import get_discord_client
from relay.services.forwarder import RelayOutcome, WebhookForwarder, WebhookRequest
from relay.services.retention import prune_expired_logs

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = "Internal Error"

_DESTINATIONS = settings.webhooks.destinations


def _decode_body(event: Mapping[str, Any]) -> bytes:
    raw_body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(raw_body, validate=True)
    if isinstance(raw_body, bytes):
        return raw_body
    return raw_body.encode("utf-8")


def _header(event: Mapping[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup on the event's header map."""

    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _to_webhook_request(event: Mapping[str, Any]) -> WebhookRequest:
    query = event.get("queryStringParameters") or {}
    return WebhookRequest(
        method=event.get("httpMethod") or "GET",
        account=query.get("account"),
        body=_decode_body(event),
        content_type=_header(event, "content-type"),
    )


async def _handle_event(event: Mapping[str, Any]) -> dict[str, Any]:
    try:
        request = _to_webhook_request(event)
    except ValueError as exc:
        logger.error("Error decoding event body: %s", exc)
        return {"statusCode": 500, "body": INTERNAL_ERROR_BODY}

    try:
        async with session_scope() as session:
            forwarder = WebhookForwarder(
                _DESTINATIONS,
                get_discord_client(),
                SQLAlchemyLogEntryRepository(session),
            )
            result = await forwarder.handle(request)
    except Exception:
        logger.exception("Relay invocation failed outside the forwarder")
        return {"statusCode": 500, "body": INTERNAL_ERROR_BODY}

    body = result.message
    if result.outcome in (RelayOutcome.FORWARD_FAILED, RelayOutcome.LOG_FAILED):
        body = INTERNAL_ERROR_BODY
    return {"statusCode": result.status_code, "body": body}


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    """Relay one webhook delivered as a function-platform event."""

    return asyncio.run(_handle_event(event))


async def _prune() -> int:
    async with session_scope() as session:
        return await prune_expired_logs(SQLAlchemyLogEntryRepository(session))


def cleanup_handler(event: Any = None, context: Any = None) -> dict[str, Any]:
    """Scheduled retention sweep over the log table."""

    logger.info("Log retention job invoked.")
    removed = asyncio.run(_prune())
    logger.info("Log retention job finished; removed=%d", removed)
    return {"status": "success", "removed": removed}


__all__ = ["cleanup_handler", "handler"]
