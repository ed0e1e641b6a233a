"""Read access to recently relayed messages."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Query

from relay.controllers.dependencies import LogRepositoryDep
from relay.views import LogEntryRead

router = APIRouter(prefix="/logs", tags=["logs"])

LimitQuery = Annotated[int, Query(ge=1, le=100)]


@router.get("/", response_model=List[LogEntryRead])
async def list_log_entries(
    repository: LogRepositoryDep,
    account: Optional[str] = None,
    limit: LimitQuery = 20,
) -> List[LogEntryRead]:
    return await repository.list_recent(limit=limit, account_name=account)
