"""Service layer for the webhook relay."""

from .discord import DiscordWebhookClient, ForwardError, get_discord_client
from .forwarder import (
    RelayOutcome,
    RelayResult,
    WebhookForwarder,
    WebhookRequest,
)
from .message_summary import MessageParseError, MessageSummary, summarize_message
from .retention import prune_expired_logs

__all__ = [
    "DiscordWebhookClient",
    "ForwardError",
    "get_discord_client",
    "RelayOutcome",
    "RelayResult",
    "WebhookForwarder",
    "WebhookRequest",
    "MessageParseError",
    "MessageSummary",
    "summarize_message",
    "prune_expired_logs",
]
