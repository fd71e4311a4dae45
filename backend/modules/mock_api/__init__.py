"""
Mock API module.

In-memory stand-in for the ride-booking backend with simulated latency
and transient failures.

Public API:
- IRideApi: Interface for backend operations
- MockApiService: In-memory implementation
- MockDataStore / MockDataGenerator: Dataset and synthetic records
- mock_api_request / call_api: Simulated network round-trip helpers
- SimulatedApiError: Injected transient failure
- create_test_user / create_test_users: Known accounts for manual testing
"""

from .interfaces import IRideApi
from .models import (
    AuthResponse,
    LoginData,
    RegisterData,
    Ride,
    RideHistoryResponse,
    RideListResponse,
    RideRequest,
    RideRequestPayload,
    RideRequestStatus,
    RideStatus,
    UpdateProfileRequest,
    User,
    UserVerificationStatus,
    VehicleInfo,
)
from .exceptions import SimulatedApiError
from .generator import MockDataGenerator
from .simulator import call_api, mock_api_request
from .store import MockDataStore
from .service import MockApiService
from .fixtures import create_test_user, create_test_users

__all__ = [
    # Interface
    "IRideApi",
    # Implementation
    "MockApiService",
    "MockDataStore",
    "MockDataGenerator",
    "mock_api_request",
    "call_api",
    "create_test_user",
    "create_test_users",
    # Models
    "AuthResponse",
    "LoginData",
    "RegisterData",
    "Ride",
    "RideHistoryResponse",
    "RideListResponse",
    "RideRequest",
    "RideRequestPayload",
    "RideRequestStatus",
    "RideStatus",
    "UpdateProfileRequest",
    "User",
    "UserVerificationStatus",
    "VehicleInfo",
    # Exceptions
    "SimulatedApiError",
]
