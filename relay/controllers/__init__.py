"""FastAPI routers acting as controllers."""

from . import logs, webhook

__all__ = ["logs", "webhook"]
