"""Relay an automation webhook to Discord and log what Discord created.

One call to :meth:`WebhookForwarder.handle` runs, in order:

1. Method and account validation (405 / 400, nothing else happens).
2. Verbatim POST of the body to the account's Discord webhook with ``wait=true``.
3. Extraction of screenshot, status and location from the echoed message.
4. Insert of one log entry, then pruning of entries past the retention window.

Failures in step 2 and failures in steps 3-4 both end as a 500; they are
only told apart in the operator log and the ``relay_forwards_total`` metric.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from relay.application.interfaces import LogEntryRepositoryInterface
from relay.services.discord import DiscordWebhookClient, ForwardError
from relay.services.message_summary import parse_message, summarize_message
from relay.services.retention import prune_expired_logs
from relay.telemetry import record_forward
from relay.views.logs import LogEntryCreate, LogEntryRead

logger = logging.getLogger(__name__)


class RelayOutcome(str, Enum):
    FORWARDED = "forwarded"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    UNKNOWN_ACCOUNT = "unknown_account"
    FORWARD_FAILED = "forward_failed"
    LOG_FAILED = "log_failed"


STATUS_CODES: dict[RelayOutcome, int] = {
    RelayOutcome.FORWARDED: 200,
    RelayOutcome.METHOD_NOT_ALLOWED: 405,
    RelayOutcome.UNKNOWN_ACCOUNT: 400,
    RelayOutcome.FORWARD_FAILED: 500,
    RelayOutcome.LOG_FAILED: 500,
}

RESPONSE_MESSAGES: dict[RelayOutcome, str] = {
    RelayOutcome.FORWARDED: "Forwarded & Logged",
    RelayOutcome.METHOD_NOT_ALLOWED: "Method Not Allowed",
    RelayOutcome.UNKNOWN_ACCOUNT: "Unknown account or missing webhook config.",
    RelayOutcome.FORWARD_FAILED: "Internal Server Error",
    RelayOutcome.LOG_FAILED: "Internal Server Error",
}

_REJECTIONS = {RelayOutcome.METHOD_NOT_ALLOWED, RelayOutcome.UNKNOWN_ACCOUNT}


@dataclass(slots=True, frozen=True)
class WebhookRequest:
    """Platform-neutral view of one inbound webhook call."""

    method: str
    account: Optional[str]
    body: bytes
    content_type: Optional[str] = None


@dataclass(slots=True, frozen=True)
class RelayResult:
    outcome: RelayOutcome
    entry: Optional[LogEntryRead] = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.outcome]

    @property
    def message(self) -> str:
        return RESPONSE_MESSAGES[self.outcome]


class WebhookForwarder:
    """Forward a webhook to its account's Discord channel and log the result."""

    def __init__(
        self,
        destinations: Mapping[str, str],
        client: DiscordWebhookClient,
        repository: LogEntryRepositoryInterface,
    ) -> None:
        self._destinations = destinations
        self._client = client
        self._repository = repository

    def resolve_destination(self, account: Optional[str]) -> Optional[str]:
        """Return the webhook URL for ``account`` or None when not configured."""

        if not account:
            return None
        return self._destinations.get(account) or None

    async def handle(self, request: WebhookRequest) -> RelayResult:
        if request.method.upper() != "POST":
            return self._finish(None, RelayOutcome.METHOD_NOT_ALLOWED)

        webhook_url = self.resolve_destination(request.account)
        if webhook_url is None:
            logger.warning("Rejected webhook for unknown account=%r", request.account)
            return self._finish(None, RelayOutcome.UNKNOWN_ACCOUNT)

        account = request.account
        try:
            response = await self._client.execute(
                webhook_url,
                request.body,
                request.content_type,
            )
        except ForwardError as exc:
            logger.error("Error forwarding account=%s: %s", account, exc)
            return self._finish(account, RelayOutcome.FORWARD_FAILED)

        try:
            summary = summarize_message(parse_message(response.content))
            entry = await self._repository.add(
                LogEntryCreate(
                    account_name=account,
                    status=summary.status,
                    location=summary.location,
                    screenshot_url=summary.screenshot_url,
                )
            )
            await prune_expired_logs(self._repository)
        except Exception:
            logger.exception("Forwarded account=%s to Discord but logging failed", account)
            return self._finish(account, RelayOutcome.LOG_FAILED)

        logger.info(
            "Forwarded account=%s status=%r location=%r screenshot=%s",
            account,
            entry.status,
            entry.location,
            "yes" if entry.screenshot_url else "no",
        )
        return self._finish(account, RelayOutcome.FORWARDED, entry)

    @staticmethod
    def _finish(
        account: Optional[str],
        outcome: RelayOutcome,
        entry: Optional[LogEntryRead] = None,
    ) -> RelayResult:
        record_forward(account, "rejected" if outcome in _REJECTIONS else outcome.value)
        return RelayResult(outcome=outcome, entry=entry)


__all__ = [
    "RESPONSE_MESSAGES",
    "RelayOutcome",
    "RelayResult",
    "STATUS_CODES",
    "WebhookForwarder",
    "WebhookRequest",
]
