"""
Mock API service implementation.

Stands in for the real ride-booking backend: every operation is one
simulated network call wrapping a lookup or mutation of the injected
MockDataStore.
"""

import asyncio
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

import jwt

from shared.config import get_settings
from shared.exceptions import ErrorCode
from shared.models import ApiMeta, ApiResponse, now_ms

from .interfaces import IRideApi
from .models import (
    AuthResponse,
    LogoutResponse,
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
)
from .simulator import Sleeper, mock_api_request, random_delay_ms
from .store import MockDataStore

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
REFRESH_TTL_SECONDS = 7 * 24 * 3600

BOOKABLE_STATUSES = (RideStatus.AVAILABLE, RideStatus.IN_PROGRESS)


class MockApiService(IRideApi):
    """
    In-memory implementation of IRideApi with simulated latency and failures.

    The service keeps a notion of the "current user" the way a browser
    session would; REST callers pass the user explicitly instead.
    """

    def __init__(
        self,
        store: MockDataStore,
        error_rate: Optional[float] = None,
        rng: Optional[random.Random] = None,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], int] = now_ms,
        jwt_secret: Optional[str] = None,
        session_ttl_seconds: Optional[int] = None,
        institutional_domain: Optional[str] = None,
        min_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
    ):
        settings = get_settings()
        self._store = store
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._clock = clock
        self._jwt_secret = jwt_secret or settings.jwt_secret
        self._session_ttl_ms = (session_ttl_seconds or settings.session_ttl_seconds) * 1000
        self._domain = (institutional_domain or settings.institutional_domain).lower()
        self._min_delay_ms = settings.mock_min_delay_ms if min_delay_ms is None else min_delay_ms
        self._max_delay_ms = settings.mock_max_delay_ms if max_delay_ms is None else max_delay_ms
        self._error_rate = 0.0
        self.set_error_rate(settings.mock_error_rate if error_rate is None else error_rate)
        self.current_user: Optional[User] = None

    @property
    def store(self) -> MockDataStore:
        return self._store

    @property
    def error_rate(self) -> float:
        return self._error_rate

    def set_error_rate(self, rate: float) -> None:
        """Set the failure probability, clamped to [0, 1]."""
        self._error_rate = max(0.0, min(1.0, rate))

    # Helpers

    async def _simulate(
        self,
        payload_fn,
        error_message: str,
        error_code: ErrorCode,
        delay: Optional[int] = None,
        error_rate: Optional[float] = None,
    ):
        rate = self._error_rate if error_rate is None else error_rate
        if delay is None:
            delay = random_delay_ms(self._rng, self._min_delay_ms, self._max_delay_ms)
        return await mock_api_request(
            payload_fn,
            delay=delay,
            should_fail=self._rng.random() < rate,
            error_message=error_message,
            error_code=error_code,
            rng=self._rng,
            sleep=self._sleep,
        )

    def _mint_token(self, user: User, token_type: str, expires_at_ms: int) -> str:
        issued_at = self._clock() // 1000
        payload = {
            "sub": user.id,
            "email": user.email,
            "type": token_type,
            "iat": issued_at,
            "exp": expires_at_ms // 1000,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._jwt_secret, algorithm=TOKEN_ALGORITHM)

    def _auth_response(self, user: User) -> AuthResponse:
        now = self._clock()
        expires_at = now + self._session_ttl_ms
        return AuthResponse(
            user=user,
            token=self._mint_token(user, "access", expires_at),
            refresh_token=self._mint_token(user, "refresh", now + REFRESH_TTL_SECONDS * 1000),
            expires_at=expires_at,
        )

    def _resolve_user(self, user_id: Optional[str]) -> Optional[User]:
        if user_id is not None:
            return self._store.find_user_by_id(user_id)
        return self.current_user

    # Authentication

    async def login(self, email: str, password: str) -> ApiResponse[AuthResponse]:
        """Look the user up by email; the password is not verified by the mock."""

        def payload() -> ApiResponse[AuthResponse]:
            user = self._store.find_user_by_email(email)
            if user is None:
                return ApiResponse.fail(
                    "Invalid email or password",
                    ErrorCode.AUTH_INVALID_CREDENTIALS,
                )
            self.current_user = user
            return ApiResponse[AuthResponse].ok(self._auth_response(user))

        return await self._simulate(
            payload,
            error_message="Login failed. Please try again.",
            error_code=ErrorCode.AUTH_ERROR,
        )

    async def register(self, data: RegisterData) -> ApiResponse[AuthResponse]:
        async def payload() -> ApiResponse[AuthResponse]:
            async with self._store.lock:
                if self._store.find_user_by_email(data.email) is not None:
                    return ApiResponse.fail(
                        "Email already in use",
                        ErrorCode.AUTH_EMAIL_IN_USE,
                    )

                if not data.email.lower().endswith(f"@{self._domain}"):
                    return ApiResponse.fail(
                        "Registration requires a valid Purdue email address",
                        ErrorCode.AUTH_INVALID_EMAIL_DOMAIN,
                    )

                now = datetime.now(timezone.utc)
                user = self._store.generator.user().model_copy(update={
                    "id": f"user-{uuid.uuid4().hex[:12]}",
                    "email": data.email,
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                    "phone_number": data.phone_number,
                    "created_at": now,
                    "updated_at": now,
                })
                self._store.users.append(user)

            logger.info(f"Registered user {user.id}")
            self.current_user = user
            return ApiResponse[AuthResponse].ok(self._auth_response(user))

        return await self._simulate(
            payload,
            error_message="Registration failed. Please try again.",
            error_code=ErrorCode.AUTH_ERROR,
        )

    async def logout(self) -> ApiResponse[LogoutResponse]:
        def payload() -> ApiResponse[LogoutResponse]:
            self.current_user = None
            return ApiResponse[LogoutResponse].ok(LogoutResponse())

        return await self._simulate(
            payload,
            error_message="Logout failed. Please try again.",
            error_code=ErrorCode.AUTH_ERROR,
            delay=500,
            error_rate=self._error_rate / 2,
        )

    async def get_current_user(self) -> ApiResponse[Optional[User]]:
        return await self._simulate(
            lambda: ApiResponse[Optional[User]].ok(self.current_user),
            error_message="An unexpected error occurred",
            error_code=ErrorCode.ERR_UNKNOWN,
            delay=300,
            error_rate=self._error_rate / 2,
        )

    # Profile

    async def get_user(self, user_id: str) -> ApiResponse[User]:
        def payload() -> ApiResponse[User]:
            user = self._store.find_user_by_id(user_id)
            if user is None:
                return ApiResponse.fail("User not found", ErrorCode.USER_NOT_FOUND)
            return ApiResponse[User].ok(user)

        return await self._simulate(
            payload,
            error_message="Failed to fetch user profile. Please try again.",
            error_code=ErrorCode.ERR_UNKNOWN,
            delay=300,
            error_rate=self._error_rate / 2,
        )

    async def update_profile(
        self,
        user_id: str,
        data: UpdateProfileRequest,
    ) -> ApiResponse[User]:
        async def payload() -> ApiResponse[User]:
            async with self._store.lock:
                user = self._store.find_user_by_id(user_id)
                if user is None:
                    return ApiResponse.fail("User not found", ErrorCode.USER_NOT_FOUND)

                changes = data.model_dump(exclude_none=True)
                changes["updated_at"] = datetime.now(timezone.utc)
                updated = user.model_copy(update=changes)
                self._store.replace_user(updated)

            if self.current_user is not None and self.current_user.id == user_id:
                self.current_user = updated
            return ApiResponse[User].ok(updated)

        return await self._simulate(
            payload,
            error_message="Profile update failed. Please try again.",
            error_code=ErrorCode.USER_UPDATE_ERROR,
        )

    # Rides

    async def get_available_rides(self) -> ApiResponse[RideListResponse]:
        def payload() -> ApiResponse[RideListResponse]:
            rides = sorted(
                (r for r in self._store.rides if r.status in BOOKABLE_STATUSES),
                key=lambda r: r.scheduled_time,
            )
            return ApiResponse[RideListResponse].ok(
                RideListResponse(rides=rides, meta=ApiMeta(total=len(rides)))
            )

        return await self._simulate(
            payload,
            error_message="Failed to fetch available rides. Please try again.",
            error_code=ErrorCode.RIDES_FETCH_ERROR,
        )

    async def request_ride(
        self,
        payload: RideRequestPayload,
        user_id: Optional[str] = None,
    ) -> ApiResponse[RideRequest]:
        """
        Record a pending request.

        Seats are advisory at this point: the ride's seat count only changes
        when the request is confirmed.
        """

        async def create() -> ApiResponse[RideRequest]:
            user = self._resolve_user(user_id)
            if user is None:
                return ApiResponse.fail("Authentication required", ErrorCode.AUTH_REQUIRED)

            async with self._store.lock:
                if payload.ride_id is not None and self._store.find_ride_by_id(payload.ride_id) is None:
                    return ApiResponse.fail(
                        "Ride not found",
                        ErrorCode.RIDE_NOT_FOUND,
                        {"ride_id": payload.ride_id},
                    )

                now = datetime.now(timezone.utc)
                request = self._store.generator.ride_request(user.id, payload.ride_id).model_copy(
                    update={
                        "pickup_location": payload.pickup_location,
                        "requested_time": payload.requested_time,
                        "status": RideRequestStatus.PENDING,
                        "passenger_count": payload.passenger_count,
                        "special_instructions": payload.special_instructions,
                        "created_at": now,
                        "updated_at": now,
                    }
                )
                self._store.ride_requests.append(request)

            logger.info(f"Ride request {request.id} recorded for user {user.id}")
            return ApiResponse[RideRequest].ok(request)

        return await self._simulate(
            create,
            error_message="Failed to request ride. Please try again.",
            error_code=ErrorCode.RIDE_REQUEST_ERROR,
        )

    def _compare_and_swap_seats(self, ride_id: str, expected: int, new_seats: int) -> Optional[Ride]:
        """Swap a ride's seat count only if it still holds the expected value."""
        ride = self._store.find_ride_by_id(ride_id)
        if ride is None or ride.available_seats != expected:
            return None

        if new_seats == 0:
            status = RideStatus.FULL
        elif ride.status == RideStatus.FULL:
            status = RideStatus.AVAILABLE
        else:
            status = ride.status

        updated = ride.model_copy(update={
            "available_seats": new_seats,
            "status": status,
            "updated_at": datetime.now(timezone.utc),
        })
        self._store.replace_ride(updated)
        return updated

    async def confirm_ride_request(self, request_id: str) -> ApiResponse[RideRequest]:
        async def confirm() -> ApiResponse[RideRequest]:
            async with self._store.lock:
                request = self._store.find_request_by_id(request_id)
                if request is None:
                    return ApiResponse.fail("Ride request not found", ErrorCode.REQUEST_NOT_FOUND)
                if request.status != RideRequestStatus.PENDING:
                    return ApiResponse.fail(
                        f"Ride request is {request.status.value}",
                        ErrorCode.INVALID_REQUEST_STATE,
                        {"status": request.status.value},
                    )

                ride = self._store.find_ride_by_id(request.ride_id)
                if ride is None:
                    return ApiResponse.fail("Ride not found", ErrorCode.RIDE_NOT_FOUND)

                seats = ride.available_seats
                if ride.status not in BOOKABLE_STATUSES or seats < request.passenger_count:
                    return ApiResponse.fail(
                        "Not enough seats available on this ride",
                        ErrorCode.RIDE_FULL,
                        {"available_seats": seats, "requested": request.passenger_count},
                    )

                if self._compare_and_swap_seats(ride.id, seats, seats - request.passenger_count) is None:
                    return ApiResponse.fail(
                        "Ride changed while confirming, please retry",
                        ErrorCode.RIDE_REQUEST_ERROR,
                    )

                confirmed = request.model_copy(update={
                    "status": RideRequestStatus.CONFIRMED,
                    "updated_at": datetime.now(timezone.utc),
                })
                self._store.replace_request(confirmed)

            return ApiResponse[RideRequest].ok(confirmed)

        return await self._simulate(
            confirm,
            error_message="Failed to confirm ride request. Please try again.",
            error_code=ErrorCode.RIDE_REQUEST_ERROR,
        )

    async def get_ride_history(self, user_id: str) -> ApiResponse[RideHistoryResponse]:
        """
        Join a user's requests to their rides.

        Requests whose ride no longer exists are kept; their rides are
        simply missing from ``rides``.
        """

        def payload() -> ApiResponse[RideHistoryResponse]:
            requests = self._store.find_requests_by_user_id(user_id)
            ride_ids = {r.ride_id for r in requests}
            rides = [r for r in self._store.rides if r.id in ride_ids]

            rides.sort(key=lambda r: r.scheduled_time, reverse=True)
            requests.sort(key=lambda r: r.created_at, reverse=True)

            return ApiResponse[RideHistoryResponse].ok(
                RideHistoryResponse(
                    rides=rides,
                    requests=requests,
                    meta=ApiMeta(total=len(rides)),
                )
            )

        return await self._simulate(
            payload,
            error_message="Failed to fetch ride history. Please try again.",
            error_code=ErrorCode.RIDE_HISTORY_ERROR,
        )

    async def get_ride_status(self, ride_id: str) -> ApiResponse[Ride]:
        def payload() -> ApiResponse[Ride]:
            ride = self._store.find_ride_by_id(ride_id)
            if ride is None:
                return ApiResponse.fail("Ride not found", ErrorCode.RIDE_NOT_FOUND)
            return ApiResponse[Ride].ok(ride)

        return await self._simulate(
            payload,
            error_message="Failed to fetch ride status. Please try again.",
            error_code=ErrorCode.RIDE_STATUS_ERROR,
        )

    async def cancel_ride_request(self, request_id: str) -> ApiResponse[RideRequest]:
        async def cancel() -> ApiResponse[RideRequest]:
            async with self._store.lock:
                request = self._store.find_request_by_id(request_id)
                if request is None:
                    return ApiResponse.fail("Ride request not found", ErrorCode.REQUEST_NOT_FOUND)

                if request.status == RideRequestStatus.CONFIRMED:
                    ride = self._store.find_ride_by_id(request.ride_id)
                    if ride is not None:
                        released = min(ride.total_seats, ride.available_seats + request.passenger_count)
                        self._compare_and_swap_seats(ride.id, ride.available_seats, released)

                cancelled = request.model_copy(update={
                    "status": RideRequestStatus.CANCELLED,
                    "updated_at": datetime.now(timezone.utc),
                })
                self._store.replace_request(cancelled)

            return ApiResponse[RideRequest].ok(cancelled)

        return await self._simulate(
            cancel,
            error_message="Failed to cancel ride request. Please try again.",
            error_code=ErrorCode.CANCEL_REQUEST_ERROR,
        )
