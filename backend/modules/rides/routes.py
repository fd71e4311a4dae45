"""
Ride API endpoints.

Provides REST endpoints for browsing, requesting and cancelling rides, and
an SSE stream of a ride's status.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_data_store, get_notifications, get_ride_api
from api.middleware.auth import get_current_user
from api.models.errors import envelope_response
from shared.config import get_settings
from shared.exceptions import ErrorCode
from shared.models import ApiResponse, AuthenticatedUser

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import Ride, RideRequestPayload, RideStatus
from modules.mock_api.simulator import call_api
from modules.mock_api.store import MockDataStore
from modules.notifications.queue import NotificationQueue

from .watcher import RideStatusSubscription, format_time_until

logger = logging.getLogger(__name__)

router = APIRouter()

TERMINAL_STATUSES = (RideStatus.COMPLETED, RideStatus.CANCELLED)


def _owned_request_or_error(
    store: MockDataStore,
    request_id: str,
    user: AuthenticatedUser,
) -> JSONResponse | None:
    """404 envelope if the request exists but belongs to someone else."""
    request = store.find_request_by_id(request_id)
    if request is not None and request.user_id != user.id:
        logger.warning(f"User {user.id} tried to modify request {request_id} of another user")
        return envelope_response(
            ApiResponse.fail("Ride request not found", ErrorCode.REQUEST_NOT_FOUND)
        )
    return None


@router.get("/available")
async def get_available_rides(
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """Rides open for booking or in progress, soonest first."""
    return envelope_response(await call_api(api.get_available_rides()))


@router.post("/request")
async def request_ride(
    payload: RideRequestPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """
    Record a pending ride request for the current user.

    Seats are only taken when the request is confirmed.
    """
    response = await call_api(api.request_ride(payload, user_id=user.id))
    return envelope_response(response, success_status=status.HTTP_201_CREATED)


@router.get("/history")
async def get_ride_history(
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """The current user's requests and the rides they resolve to, newest first."""
    return envelope_response(await call_api(api.get_ride_history(user.id)))


@router.get("/status/{ride_id}")
async def get_ride_status(
    ride_id: str,
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    return envelope_response(await call_api(api.get_ride_status(ride_id)))


def _status_event(ride: Ride) -> dict:
    return {
        "event": "status",
        "data": ride.model_dump_json(by_alias=True, exclude_none=True),
    }


async def status_event_generator(
    subscription: RideStatusSubscription,
    updates: "asyncio.Queue[Ride]",
):
    """
    Generate SSE events for a ride until it reaches a terminal status.

    Yields the current status first, then one event per change. An
    ``eta`` event follows each in-progress status.
    """
    ride = subscription.ride
    async with subscription:
        while True:
            yield _status_event(ride)
            if ride.status == RideStatus.IN_PROGRESS:
                yield {"event": "eta", "data": format_time_until(ride.estimated_arrival)}
            if ride.status in TERMINAL_STATUSES:
                break
            ride = await updates.get()


@router.get("/status/{ride_id}/stream")
async def stream_ride_status(
    ride_id: str,
    api: IRideApi = Depends(get_ride_api),
    notifications: NotificationQueue = Depends(get_notifications),
):
    """
    Stream a ride's status via SSE.

    Event format:
        event: status
        data: <Ride JSON>

    The stream ends once the ride is completed or cancelled. An unknown
    ride is answered with a plain 404 envelope instead of a stream.
    """
    initial = await call_api(api.get_ride_status(ride_id))
    if not initial.success:
        return envelope_response(initial)

    updates: asyncio.Queue[Ride] = asyncio.Queue()
    subscription = RideStatusSubscription(
        api,
        ride_id,
        notifications,
        on_status_change=updates.put_nowait,
        interval=get_settings().ride_poll_interval,
    )
    subscription.ride = initial.data

    return EventSourceResponse(
        status_event_generator(subscription, updates),
        media_type="text/event-stream",
    )


@router.post("/confirm/{request_id}")
async def confirm_ride_request(
    request_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
    store: MockDataStore = Depends(get_data_store),
) -> JSONResponse:
    """Take the seats for a pending request."""
    denied = _owned_request_or_error(store, request_id, user)
    if denied is not None:
        return denied
    return envelope_response(await call_api(api.confirm_ride_request(request_id)))


@router.post("/cancel/{request_id}")
async def cancel_ride_request(
    request_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
    store: MockDataStore = Depends(get_data_store),
) -> JSONResponse:
    """Cancel a request, giving back its seats if it was confirmed."""
    denied = _owned_request_or_error(store, request_id, user)
    if denied is not None:
        return denied
    return envelope_response(await call_api(api.cancel_ride_request(request_id)))
