from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from relay.views.logs import LogEntryCreate, LogEntryRead


class LogEntryRepositoryInterface(ABC):
    """Persistence contract for relay log entries"""

    @abstractmethod
    async def add(self, entry: LogEntryCreate) -> LogEntryRead:
        ...

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        ...

    @abstractmethod
    async def list_recent(
        self,
        limit: int = 20,
        account_name: Optional[str] = None,
    ) -> List[LogEntryRead]:
        ...
