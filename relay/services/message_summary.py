"""Extract dashboard fields from the Discord message created by a relayed webhook."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from relay.views.discord import DiscordMessage

DEFAULT_STATUS = "Update"
DEFAULT_LOCATION = "Unknown"
LOCATION_FIELD_MARKERS = ("Location", "Field")


class MessageParseError(ValueError):
    """Raised when Discord's response body is not a usable message object."""


@dataclass(slots=True, frozen=True)
class MessageSummary:
    status: str = DEFAULT_STATUS
    location: str = DEFAULT_LOCATION
    screenshot_url: Optional[str] = None


def parse_message(raw_body: bytes | str) -> DiscordMessage:
    """Validate the raw JSON body returned by Discord."""

    try:
        return DiscordMessage.model_validate_json(raw_body)
    except ValidationError as exc:
        raise MessageParseError(f"Invalid Discord message payload: {exc}") from exc


def summarize_message(message: DiscordMessage) -> MessageSummary:
    """Pick screenshot, status and location out of a Discord message.

    The screenshot is the first attachment. Status and location come from the
    first embed only: description, then title, then ``"Update"``; location is
    the first field whose name contains ``"Location"`` or ``"Field"``
    (case-sensitive).
    """

    screenshot_url = message.attachments[0].url if message.attachments else None

    if not message.embeds:
        return MessageSummary(screenshot_url=screenshot_url)

    embed = message.embeds[0]
    status = embed.description or embed.title or DEFAULT_STATUS

    location = DEFAULT_LOCATION
    for field in embed.fields:
        if any(marker in field.name for marker in LOCATION_FIELD_MARKERS):
            location = field.value
            break

    return MessageSummary(
        status=status,
        location=location,
        screenshot_url=screenshot_url,
    )


__all__ = [
    "DEFAULT_LOCATION",
    "DEFAULT_STATUS",
    "MessageParseError",
    "MessageSummary",
    "parse_message",
    "summarize_message",
]
