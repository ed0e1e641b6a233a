"""SQLAlchemy models for the relay."""

from .base import Base
from .log_entry import LogEntry  # noqa: F401

__all__ = ["Base", "LogEntry"]
