"""Thin httpx client for Discord incoming webhooks."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from relay.config.settings import settings

logger = logging.getLogger(__name__)


class ForwardError(RuntimeError):
    """Raised when Discord cannot be reached or rejects the payload."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DiscordWebhookClient:
    """Execute Discord webhooks and return the created message object."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.webhooks.timeout_seconds
        self._transport = transport

    async def execute(
        self,
        webhook_url: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> httpx.Response:
        """POST ``body`` verbatim to ``webhook_url`` with ``wait=true``.

        ``wait=true`` makes Discord answer with the stored message instead of
        an empty 204, which is what the attachment and embed lookup reads.
        """

        headers = {"Content-Type": content_type} if content_type else {}

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    webhook_url,
                    params={"wait": "true"},
                    content=body,
                    headers=headers,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise ForwardError(
                    f"Discord rejected the webhook: {exc}",
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.RequestError as exc:
                raise ForwardError(f"Unable to reach Discord: {exc}") from exc

        logger.debug(
            "Discord accepted webhook status=%s bytes=%d",
            response.status_code,
            len(body),
        )
        return response


def get_discord_client() -> DiscordWebhookClient:
    """Return the default Discord webhook client instance."""

    return _DEFAULT_CLIENT


_DEFAULT_CLIENT = DiscordWebhookClient()


__all__ = ["DiscordWebhookClient", "ForwardError", "get_discord_client"]
