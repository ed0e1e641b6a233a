"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    FORWARD_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_request,
    record_forward,
)

__all__ = [
    "ERROR_COUNTER",
    "FORWARD_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_request",
    "record_forward",
]
