"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

import time
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class CamelModel(BaseModel):
    """
    Base model serialised with camelCase keys.

    Python code uses snake_case attributes; JSON uses the wire names
    (``firstName``, ``availableSeats``) the frontend expects. Either
    spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiError(CamelModel):
    """Error payload inside a failure envelope."""

    code: str = Field(..., description="Tagged error code")
    message: str = Field(..., description="Human-readable message")
    details: Optional[dict[str, Any]] = Field(None, description="Extra context")


class ApiMeta(CamelModel):
    """Envelope metadata."""

    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    total: Optional[int] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class ApiResponse(CamelModel, Generic[T]):
    """
    Uniform envelope returned by every simulated API call.

    ``success`` is True with ``data`` set, or False with ``error`` set.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[ApiError] = None
    meta: Optional[ApiMeta] = None

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse":
        """Build a success envelope."""
        return cls(success=True, data=data, meta=ApiMeta())

    @classmethod
    def fail(
        cls,
        message: str = "An unexpected error occurred",
        code: str = "ERR_UNKNOWN",
        details: Optional[dict[str, Any]] = None,
    ) -> "ApiResponse":
        """Build a failure envelope."""
        code = getattr(code, "value", code)
        return cls(
            success=False,
            error=ApiError(code=code, message=message, details=details),
            meta=ApiMeta(),
        )


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from the bearer token claims and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID")
    email: EmailStr = Field(..., description="User's email address")
    expires_at: Optional[int] = Field(None, description="Token expiry (epoch ms)")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }
