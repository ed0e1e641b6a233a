"""Age-based pruning of relay log entries."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from relay.application.interfaces import LogEntryRepositoryInterface
from relay.config.settings import settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp matching the ``created_at`` column."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def retention_cutoff(
    now: datetime | None = None,
    retention: timedelta | None = None,
) -> datetime:
    """Return the instant before which log entries are expired."""

    window = retention if retention is not None else timedelta(
        minutes=settings.log_retention_minutes
    )
    return (now or utcnow()) - window


async def prune_expired_logs(
    repository: LogEntryRepositoryInterface,
    *,
    now: datetime | None = None,
    retention: timedelta | None = None,
) -> int:
    """Delete every entry older than the retention window; return the count."""

    cutoff = retention_cutoff(now, retention)
    removed = await repository.delete_older_than(cutoff)
    if removed:
        logger.info("Pruned %d log entries created before %s", removed, cutoff.isoformat())
    return removed


__all__ = ["prune_expired_logs", "retention_cutoff", "utcnow"]
