from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from relay.application.interfaces import LogEntryRepositoryInterface
from relay.models.log_entry import LogEntry
from relay.views.logs import LogEntryCreate, LogEntryRead


class SQLAlchemyLogEntryRepository(LogEntryRepositoryInterface):
    """SQLAlchemy implementation of the relay log store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, entry: LogEntryCreate) -> LogEntryRead:
        db_entry = LogEntry(
            account_name=entry.account_name,
            status=entry.status,
            location=entry.location,
            screenshot_url=entry.screenshot_url,
        )
        self.session.add(db_entry)
        await self.session.commit()
        await self.session.refresh(db_entry)
        return LogEntryRead.model_validate(db_entry)

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self.session.execute(
            delete(LogEntry).where(LogEntry.created_at < cutoff)
        )
        await self.session.commit()
        return result.rowcount or 0

    async def list_recent(
        self,
        limit: int = 20,
        account_name: Optional[str] = None,
    ) -> List[LogEntryRead]:
        query = select(LogEntry).order_by(LogEntry.created_at.desc(), LogEntry.id.desc())
        if account_name:
            query = query.where(LogEntry.account_name == account_name)
        result = await self.session.execute(query.limit(limit))
        rows = result.scalars().all()
        return [LogEntryRead.model_validate(row) for row in rows]
