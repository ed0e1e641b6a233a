"""Pydantic schemas for relay log entries."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LogEntryCreate(BaseModel):
    account_name: str
    status: str = "Update"
    location: str = "Unknown"
    screenshot_url: Optional[str] = None


class LogEntryRead(BaseModel):
    id: int
    account_name: str
    status: str
    location: str
    screenshot_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
