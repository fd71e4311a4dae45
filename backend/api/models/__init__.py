"""API models package."""

from .errors import (
    DEFAULT_ERROR_STATUS,
    ERROR_STATUS_CODES,
    envelope_response,
    status_for,
)

__all__ = [
    "DEFAULT_ERROR_STATUS",
    "ERROR_STATUS_CODES",
    "envelope_response",
    "status_for",
]
