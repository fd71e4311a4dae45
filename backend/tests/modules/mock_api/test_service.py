"""
Tests for MockApiService.

Every test runs with no latency and, unless stated otherwise, no injected
failures.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from modules.mock_api.exceptions import SimulatedApiError
from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import (
    RegisterData,
    Ride,
    RideRequestPayload,
    RideRequestStatus,
    RideStatus,
    UpdateProfileRequest,
    User,
)
from modules.mock_api.service import MockApiService
from modules.mock_api.store import MockDataStore
from shared.config import get_settings

from tests.conftest import NOW_MS


def add_ride(store: MockDataStore, available: int, total: int = 4, **changes) -> Ride:
    status = RideStatus.FULL if available == 0 else RideStatus.AVAILABLE
    ride = store.generator.ride().model_copy(update={
        "available_seats": available,
        "total_seats": total,
        "status": status,
        **changes,
    })
    store.rides.append(ride)
    return ride


def register_data(email: str = "new.rider@purdue.edu") -> RegisterData:
    return RegisterData(
        email=email,
        password="Secret1!",
        first_name="New",
        last_name="Rider",
        phone_number="7655550100",
    )


def ride_payload(ride_id=None, passengers: int = 1, pickup: str = "Chauncey Hill") -> RideRequestPayload:
    return RideRequestPayload(
        pickup_location=pickup,
        destination="Purdue University",
        requested_time=datetime.now(timezone.utc) + timedelta(minutes=15),
        passenger_count=passengers,
        ride_id=ride_id,
    )


async def pending_request(api: MockApiService, user: User, ride: Ride, passengers: int = 1):
    response = await api.request_ride(ride_payload(ride.id, passengers), user_id=user.id)
    assert response.success
    return response.data


class TestInterface:
    def test_service_implements_interface(self, api):
        """MockApiService should satisfy the IRideApi protocol."""
        assert isinstance(api, IRideApi)

    def test_error_rate_is_clamped(self, api):
        api.set_error_rate(5)
        assert api.error_rate == 1.0
        api.set_error_rate(-1)
        assert api.error_rate == 0.0

    def test_error_rate_defaults_from_settings(self, data_store):
        assert MockApiService(data_store).error_rate == get_settings().mock_error_rate


class TestLogin:
    @pytest.mark.asyncio
    async def test_known_email_succeeds(self, api, data_store):
        """Any password should log in an existing user."""
        user = data_store.users[0]
        response = await api.login(user.email, "not-checked")

        assert response.success is True
        assert response.data.user.id == user.id
        assert response.data.expires_at == NOW_MS + 3600 * 1000
        assert api.current_user.id == user.id

    @pytest.mark.asyncio
    async def test_email_match_is_case_insensitive(self, api, data_store):
        user = data_store.users[0]
        response = await api.login(user.email.upper(), "x")
        assert response.success is True

    @pytest.mark.asyncio
    async def test_token_is_signed_jwt(self, api, data_store):
        user = data_store.users[0]
        response = await api.login(user.email, "x")

        claims = jwt.decode(
            response.data.token,
            get_settings().jwt_secret,
            algorithms=["HS256"],
            options={"verify_exp": False},
        )
        assert claims["sub"] == user.id
        assert claims["email"] == user.email
        assert claims["type"] == "access"
        assert response.data.refresh_token != response.data.token

    @pytest.mark.asyncio
    async def test_unknown_email_fails_without_side_effects(self, api):
        response = await api.login("nobody@purdue.edu", "x")

        assert response.success is False
        assert response.error.code == "AUTH_INVALID_CREDENTIALS"
        assert response.error.message == "Invalid email or password"
        assert api.current_user is None

    @pytest.mark.asyncio
    async def test_transient_failure_raises(self, failing_api, data_store):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.login(data_store.users[0].email, "x")
        assert exc_info.value.code == "AUTH_ERROR"
        assert failing_api.current_user is None


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_and_authenticates_user(self, api, data_store):
        before = len(data_store.users)
        response = await api.register(register_data())

        assert response.success is True
        user = response.data.user
        assert user.id.startswith("user-")
        assert user.email == "new.rider@purdue.edu"
        assert len(data_store.users) == before + 1
        assert api.current_user.id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_email(self, api, data_store):
        """Registering an existing email should fail and append nothing."""
        before = len(data_store.users)
        response = await api.register(register_data(data_store.users[0].email.upper()))

        assert response.success is False
        assert response.error.code == "AUTH_EMAIL_IN_USE"
        assert response.error.message == "Email already in use"
        assert len(data_store.users) == before

    @pytest.mark.asyncio
    async def test_non_institutional_domain(self, api, data_store):
        before = len(data_store.users)
        response = await api.register(register_data("rider@gmail.com"))

        assert response.success is False
        assert response.error.code == "AUTH_INVALID_EMAIL_DOMAIN"
        assert len(data_store.users) == before

    @pytest.mark.asyncio
    async def test_duplicate_checked_before_domain(self, api, data_store):
        data_store.users.append(
            data_store.generator.user().model_copy(update={"email": "legacy@gmail.com"})
        )
        response = await api.register(register_data("legacy@gmail.com"))
        assert response.error.code == "AUTH_EMAIL_IN_USE"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_registrations(self, api, data_store):
        """Racing registrations of one email should append exactly one user."""
        before = len(data_store.users)
        responses = await asyncio.gather(*[
            api.register(register_data("race@purdue.edu")) for _ in range(5)
        ])

        assert sum(r.success for r in responses) == 1
        assert {r.error.code for r in responses if not r.success} == {"AUTH_EMAIL_IN_USE"}
        assert len(data_store.users) == before + 1


class TestSessionCalls:
    @pytest.mark.asyncio
    async def test_logout_clears_current_user(self, api, data_store):
        await api.login(data_store.users[0].email, "x")
        response = await api.logout()

        assert response.success is True
        assert response.data.success is True
        assert api.current_user is None

    @pytest.mark.asyncio
    async def test_get_current_user(self, api, data_store):
        assert (await api.get_current_user()).data is None
        await api.login(data_store.users[0].email, "x")
        assert (await api.get_current_user()).data.id == data_store.users[0].id

    @pytest.mark.asyncio
    async def test_get_user(self, api, data_store):
        user = data_store.users[2]
        assert (await api.get_user(user.id)).data == user
        assert (await api.get_user("missing")).error.code == "USER_NOT_FOUND"


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_updates_given_fields_only(self, api, data_store):
        user = data_store.users[0]
        response = await api.update_profile(user.id, UpdateProfileRequest(first_name="Renamed"))

        assert response.success is True
        assert response.data.first_name == "Renamed"
        assert response.data.last_name == user.last_name
        assert response.data.updated_at is not None
        assert data_store.find_user_by_id(user.id).first_name == "Renamed"

    @pytest.mark.asyncio
    async def test_refreshes_current_user(self, api, data_store):
        user = data_store.users[0]
        await api.login(user.email, "x")
        await api.update_profile(user.id, UpdateProfileRequest(last_name="Changed"))
        assert api.current_user.last_name == "Changed"

    @pytest.mark.asyncio
    async def test_unknown_user(self, api):
        response = await api.update_profile("missing", UpdateProfileRequest(first_name="X"))
        assert response.error.code == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_transient_failure_code(self, failing_api, data_store):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.update_profile(data_store.users[0].id, UpdateProfileRequest())
        assert exc_info.value.code == "USER_UPDATE_ERROR"


class TestAvailableRides:
    @pytest.mark.asyncio
    async def test_filters_and_sorts(self, api, data_store):
        add_ride(data_store, 0)
        add_ride(data_store, 2, status=RideStatus.COMPLETED)
        add_ride(data_store, 2, status=RideStatus.CANCELLED)

        response = await api.get_available_rides()
        rides = response.data.rides

        assert all(r.status in (RideStatus.AVAILABLE, RideStatus.IN_PROGRESS) for r in rides)
        times = [r.scheduled_time for r in rides]
        assert times == sorted(times)
        assert response.data.meta.total == len(rides)

    @pytest.mark.asyncio
    async def test_transient_failure_code(self, failing_api):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.get_available_rides()
        assert exc_info.value.code == "RIDES_FETCH_ERROR"


class TestRequestRide:
    @pytest.mark.asyncio
    async def test_pending_request_echoes_payload(self, api, data_store):
        """A new request is pending, echoes the pickup and leaves seats alone."""
        user = data_store.users[0]
        await api.login(user.email, "x")
        ride = add_ride(data_store, 3)

        response = await api.request_ride(ride_payload(ride.id, passengers=2))

        assert response.success is True
        request = response.data
        assert request.pickup_location == "Chauncey Hill"
        assert request.status == RideRequestStatus.PENDING
        assert request.passenger_count == 2
        assert request.user_id == user.id
        assert request.ride_id == ride.id
        assert data_store.find_ride_by_id(ride.id).available_seats == 3
        assert data_store.find_request_by_id(request.id) is not None

    @pytest.mark.asyncio
    async def test_explicit_user_id(self, api, data_store):
        user = data_store.users[1]
        response = await api.request_ride(ride_payload(), user_id=user.id)
        assert response.data.user_id == user.id

    @pytest.mark.asyncio
    async def test_requires_authentication(self, api, data_store):
        before = len(data_store.ride_requests)
        response = await api.request_ride(ride_payload())

        assert response.error.code == "AUTH_REQUIRED"
        assert response.error.message == "Authentication required"
        assert len(data_store.ride_requests) == before

    @pytest.mark.asyncio
    async def test_unknown_ride(self, api, data_store):
        response = await api.request_ride(ride_payload("missing-ride"), user_id=data_store.users[0].id)
        assert response.error.code == "RIDE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_transient_failure_code(self, failing_api, data_store):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.request_ride(ride_payload(), user_id=data_store.users[0].id)
        assert exc_info.value.code == "RIDE_REQUEST_ERROR"


class TestConfirmRideRequest:
    @pytest.mark.asyncio
    async def test_takes_seats(self, api, data_store):
        ride = add_ride(data_store, 3)
        request = await pending_request(api, data_store.users[0], ride, passengers=2)

        response = await api.confirm_ride_request(request.id)

        assert response.data.status == RideRequestStatus.CONFIRMED
        updated = data_store.find_ride_by_id(ride.id)
        assert updated.available_seats == 1
        assert updated.status == RideStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_last_seats_fill_the_ride(self, api, data_store):
        ride = add_ride(data_store, 2)
        request = await pending_request(api, data_store.users[0], ride, passengers=2)

        await api.confirm_ride_request(request.id)

        updated = data_store.find_ride_by_id(ride.id)
        assert updated.available_seats == 0
        assert updated.status == RideStatus.FULL

    @pytest.mark.asyncio
    async def test_not_enough_seats(self, api, data_store):
        ride = add_ride(data_store, 1)
        request = await pending_request(api, data_store.users[0], ride, passengers=2)

        response = await api.confirm_ride_request(request.id)

        assert response.error.code == "RIDE_FULL"
        assert data_store.find_ride_by_id(ride.id).available_seats == 1
        assert data_store.find_request_by_id(request.id).status == RideRequestStatus.PENDING

    @pytest.mark.asyncio
    async def test_confirm_twice(self, api, data_store):
        ride = add_ride(data_store, 3)
        request = await pending_request(api, data_store.users[0], ride)
        await api.confirm_ride_request(request.id)

        response = await api.confirm_ride_request(request.id)
        assert response.error.code == "INVALID_REQUEST_STATE"
        assert data_store.find_ride_by_id(ride.id).available_seats == 2

    @pytest.mark.asyncio
    async def test_unknown_request(self, api):
        response = await api.confirm_ride_request("missing")
        assert response.error.code == "REQUEST_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_never_overbook(self, api, data_store):
        """Seats should never go below zero however confirmations interleave."""
        ride = add_ride(data_store, 2)
        requests = [await pending_request(api, data_store.users[i], ride) for i in range(4)]

        responses = await asyncio.gather(*[api.confirm_ride_request(r.id) for r in requests])

        assert sum(r.success for r in responses) == 2
        assert {r.error.code for r in responses if not r.success} == {"RIDE_FULL"}
        updated = data_store.find_ride_by_id(ride.id)
        assert updated.available_seats == 0
        assert updated.status == RideStatus.FULL


class TestCancelRideRequest:
    @pytest.mark.asyncio
    async def test_cancel_pending(self, api, data_store):
        ride = add_ride(data_store, 3)
        request = await pending_request(api, data_store.users[0], ride)

        response = await api.cancel_ride_request(request.id)

        assert response.data.status == RideRequestStatus.CANCELLED
        assert data_store.find_ride_by_id(ride.id).available_seats == 3

    @pytest.mark.asyncio
    async def test_cancel_confirmed_releases_seats(self, api, data_store):
        """Cancelling a confirmed request gives its seats back and reopens the ride."""
        ride = add_ride(data_store, 2)
        request = await pending_request(api, data_store.users[0], ride, passengers=2)
        await api.confirm_ride_request(request.id)
        assert data_store.find_ride_by_id(ride.id).status == RideStatus.FULL

        await api.cancel_ride_request(request.id)

        updated = data_store.find_ride_by_id(ride.id)
        assert updated.available_seats == 2
        assert updated.status == RideStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_unknown_request(self, api):
        response = await api.cancel_ride_request("missing")
        assert response.error.code == "REQUEST_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_transient_failure_code(self, failing_api):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.cancel_ride_request("missing")
        assert exc_info.value.code == "CANCEL_REQUEST_ERROR"


class TestRideHistory:
    @pytest.mark.asyncio
    async def test_drops_unresolved_rides(self, api, data_store):
        """Requests whose ride is gone stay; the ride is simply missing."""
        user = data_store.users[0]
        data_store.ride_requests = [r for r in data_store.ride_requests if r.user_id != user.id]
        ride = add_ride(data_store, 3)
        resolved = await pending_request(api, user, ride)
        orphan = data_store.generator.ride_request(user.id, "ride-that-does-not-exist")
        data_store.ride_requests.append(orphan)

        response = await api.get_ride_history(user.id)

        assert [r.id for r in response.data.rides] == [ride.id]
        assert {r.id for r in response.data.requests} == {resolved.id, orphan.id}
        assert response.data.meta.total == 1

    @pytest.mark.asyncio
    async def test_sorted_newest_first(self, api, data_store):
        user = data_store.users[0]
        now = datetime.now(timezone.utc)
        early = add_ride(data_store, 3, scheduled_time=now + timedelta(hours=1))
        late = add_ride(data_store, 3, scheduled_time=now + timedelta(hours=5))
        first = await pending_request(api, user, early)
        second = await pending_request(api, user, late)

        response = await api.get_ride_history(user.id)

        ride_ids = [r.id for r in response.data.rides]
        assert ride_ids.index(late.id) < ride_ids.index(early.id)
        created = [r.created_at for r in response.data.requests]
        assert created == sorted(created, reverse=True)
        request_ids = [r.id for r in response.data.requests]
        assert first.id in request_ids and second.id in request_ids

    @pytest.mark.asyncio
    async def test_user_without_requests(self, api):
        response = await api.get_ride_history("nobody")
        assert response.data.rides == []
        assert response.data.requests == []
        assert response.data.meta.total == 0


class TestRideStatus:
    @pytest.mark.asyncio
    async def test_found(self, api, data_store):
        ride = data_store.rides[0]
        assert (await api.get_ride_status(ride.id)).data.id == ride.id

    @pytest.mark.asyncio
    async def test_not_found(self, api):
        response = await api.get_ride_status("missing")
        assert response.error.code == "RIDE_NOT_FOUND"
        assert response.error.message == "Ride not found"

    @pytest.mark.asyncio
    async def test_transient_failure_code(self, failing_api, data_store):
        with pytest.raises(SimulatedApiError) as exc_info:
            await failing_api.get_ride_status(data_store.rides[0].id)
        assert exc_info.value.code == "RIDE_STATUS_ERROR"
