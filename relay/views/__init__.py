"""Pydantic schemas used as views by the relay."""

from .discord import Attachment, DiscordMessage, Embed, EmbedField
from .logs import LogEntryCreate, LogEntryRead

__all__ = [
    "Attachment",
    "DiscordMessage",
    "Embed",
    "EmbedField",
    "LogEntryCreate",
    "LogEntryRead",
]
