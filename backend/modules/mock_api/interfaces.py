"""
Ride API interface.

The session store, form controllers, ride watcher and REST routes depend on
IRideApi, not on MockApiService. A real HTTP client can replace the mock
without touching its callers.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import ApiResponse

from .models import (
    AuthResponse,
    LogoutResponse,
    RegisterData,
    Ride,
    RideHistoryResponse,
    RideListResponse,
    RideRequest,
    RideRequestPayload,
    UpdateProfileRequest,
    User,
)


@runtime_checkable
class IRideApi(Protocol):
    """
    Interface for the ride-booking backend.

    Every method returns an ApiResponse envelope. Domain failures come back
    as ``success=False``; transient failures raise SimulatedApiError.
    """

    async def login(self, email: str, password: str) -> ApiResponse[AuthResponse]:
        """
        Authenticate by email.

        Returns:
            Envelope with the user and a fresh token pair, or
            AUTH_INVALID_CREDENTIALS when no user has that email
        """
        ...

    async def register(self, data: RegisterData) -> ApiResponse[AuthResponse]:
        """
        Create an account and authenticate it.

        Returns:
            Envelope with the new user, or AUTH_EMAIL_IN_USE /
            AUTH_INVALID_EMAIL_DOMAIN
        """
        ...

    async def logout(self) -> ApiResponse[LogoutResponse]:
        ...

    async def get_current_user(self) -> ApiResponse[Optional[User]]:
        ...

    async def get_user(self, user_id: str) -> ApiResponse[User]:
        """Profile lookup by id."""
        ...

    async def update_profile(
        self,
        user_id: str,
        data: UpdateProfileRequest,
    ) -> ApiResponse[User]:
        ...

    async def get_available_rides(self) -> ApiResponse[RideListResponse]:
        """Rides that are available or in progress, soonest first."""
        ...

    async def request_ride(
        self,
        payload: RideRequestPayload,
        user_id: Optional[str] = None,
    ) -> ApiResponse[RideRequest]:
        """
        Record a pending ride request for the given or current user.

        Seats are not taken; see confirm_ride_request().
        """
        ...

    async def confirm_ride_request(self, request_id: str) -> ApiResponse[RideRequest]:
        """Confirm a pending request, taking its seats from the ride."""
        ...

    async def get_ride_history(self, user_id: str) -> ApiResponse[RideHistoryResponse]:
        ...

    async def get_ride_status(self, ride_id: str) -> ApiResponse[Ride]:
        ...

    async def cancel_ride_request(self, request_id: str) -> ApiResponse[RideRequest]:
        ...
