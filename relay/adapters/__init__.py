"""Deployment adapters mapping platform events onto the forwarder."""

from .serverless import cleanup_handler, handler

__all__ = ["cleanup_handler", "handler"]
