"""
Base exception classes for the PurdueRide backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from enum import Enum
from typing import Optional, Any


class ErrorCode(str, Enum):
    """Tagged error codes carried by failure envelopes and exceptions."""

    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_EMAIL_IN_USE = "AUTH_EMAIL_IN_USE"
    AUTH_INVALID_EMAIL_DOMAIN = "AUTH_INVALID_EMAIL_DOMAIN"
    AUTH_ERROR = "AUTH_ERROR"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_UPDATE_ERROR = "USER_UPDATE_ERROR"
    RIDE_NOT_FOUND = "RIDE_NOT_FOUND"
    RIDES_FETCH_ERROR = "RIDES_FETCH_ERROR"
    RIDE_REQUEST_ERROR = "RIDE_REQUEST_ERROR"
    RIDE_HISTORY_ERROR = "RIDE_HISTORY_ERROR"
    RIDE_STATUS_ERROR = "RIDE_STATUS_ERROR"
    RIDE_FULL = "RIDE_FULL"
    CANCEL_REQUEST_ERROR = "CANCEL_REQUEST_ERROR"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    INVALID_REQUEST_STATE = "INVALID_REQUEST_STATE"
    STORAGE_ERROR = "STORAGE_ERROR"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class PurdueRideError(Exception):
    """
    Base exception for all PurdueRide errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else (code or self.__class__.__name__)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ExternalServiceError(PurdueRideError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
