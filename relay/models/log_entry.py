"""Forwarded webhook log model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from .base import Base


class LogEntry(Base):
    """Summary of one message relayed to Discord."""

    __tablename__ = "natro_logs"

    id = Column(Integer, primary_key=True, index=True)
    account_name = Column(String(64), nullable=False, index=True)
    status = Column(Text, nullable=False)
    location = Column(Text, nullable=False, default="Unknown")
    screenshot_url = Column(String(2048), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self) -> str:
        return (
            f"<LogEntry(id={self.id}, account_name={self.account_name!r}, "
            f"created_at={self.created_at})>"
        )


__all__ = ["LogEntry"]
