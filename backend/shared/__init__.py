"""
Shared infrastructure for PurdueRide backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes and error codes
- models: Response envelope and authenticated user
- log_config: Root logging setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, is_supabase_configured, reset_client_cache
from .exceptions import (
    ErrorCode,
    PurdueRideError,
    ExternalServiceError,
)
from .log_config import configure_logging
from .models import ApiError, ApiMeta, ApiResponse, AuthenticatedUser, CamelModel, now_ms

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "is_supabase_configured",
    "reset_client_cache",
    "ErrorCode",
    "PurdueRideError",
    "ExternalServiceError",
    "configure_logging",
    "ApiError",
    "ApiMeta",
    "ApiResponse",
    "AuthenticatedUser",
    "CamelModel",
    "now_ms",
]
