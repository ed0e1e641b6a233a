"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Mapping

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from relay.application.interfaces import LogEntryRepositoryInterface
from relay.config.settings import settings
from relay.database import get_session
from relay.infrastructure.persistence.repositories_sqlalchemy import (
    SQLAlchemyLogEntryRepository,
)
from relay.services.discord import DiscordWebhookClient, get_discord_client
from relay.services.forwarder import WebhookForwarder

SessionDep = Annotated[AsyncSession, Depends(get_session)]

_DESTINATIONS = settings.webhooks.destinations


def get_destinations() -> Mapping[str, str]:
    """Return the account -> Discord webhook mapping resolved at startup."""

    return _DESTINATIONS


async def get_log_repository(session: SessionDep) -> LogEntryRepositoryInterface:
    return SQLAlchemyLogEntryRepository(session)


LogRepositoryDep = Annotated[LogEntryRepositoryInterface, Depends(get_log_repository)]


async def get_forwarder(
    repository: LogRepositoryDep,
    client: Annotated[DiscordWebhookClient, Depends(get_discord_client)],
    destinations: Annotated[Mapping[str, str], Depends(get_destinations)],
) -> WebhookForwarder:
    """Assemble a forwarder bound to this request's log repository."""

    return WebhookForwarder(destinations, client, repository)


ForwarderDep = Annotated[WebhookForwarder, Depends(get_forwarder)]


__all__ = [
    "ForwarderDep",
    "LogRepositoryDep",
    "SessionDep",
    "get_destinations",
    "get_forwarder",
    "get_log_repository",
]
