"""
Ride status watcher.

Polls a ride's status and raises notifications when it changes. The
subscription is an explicit handle: dispose() (or leaving an ``async with``
block) stops polling, and disposing twice is harmless.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from shared.exceptions import PurdueRideError

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import Ride, RideStatus
from modules.mock_api.simulator import Sleeper, call_api
from modules.notifications.models import NotificationType
from modules.notifications.queue import NotificationQueue

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
STATUS_UPDATE_TIMEOUT_MS = 6000
DRIVER_APPROACHING_TIMEOUT_MS = 10000
APPROACHING_WINDOW = timedelta(minutes=5)

STATUS_MESSAGES = {
    RideStatus.AVAILABLE: "Your ride is now available for booking.",
    RideStatus.IN_PROGRESS: "Your ride is now in progress. Driver is on the way!",
    RideStatus.FULL: "This ride is now full. Please check other available rides.",
    RideStatus.COMPLETED: "Your ride has been completed. Thank you for using PurdueRide!",
    RideStatus.CANCELLED: "Your ride has been cancelled.",
}

STATUS_NOTIFICATION_TYPES = {
    RideStatus.COMPLETED: NotificationType.SUCCESS,
    RideStatus.CANCELLED: NotificationType.ERROR,
    RideStatus.FULL: NotificationType.WARNING,
}

StatusListener = Callable[[Ride], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def format_time_until(arrival: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-readable time until arrival ("Less than a minute", "3 minutes")."""
    if arrival is None:
        return "Unknown"
    now = now or utc_now()
    minutes = round((_aware(arrival) - _aware(now)).total_seconds() / 60)
    if minutes < 1:
        return "Less than a minute"
    if minutes == 1:
        return "1 minute"
    return f"{minutes} minutes"


class RideStatusSubscription:
    """
    A running poll of one ride's status.

    Attributes:
        ride: Last status fetched successfully, or None
        error: Message of the last failed fetch, cleared on success
    """

    def __init__(
        self,
        api: IRideApi,
        ride_id: str,
        notifications: NotificationQueue,
        on_status_change: Optional[StatusListener] = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._api = api
        self._ride_id = ride_id
        self._notifications = notifications
        self._on_status_change = on_status_change
        self._interval = interval
        self._sleep = sleep
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._disposed = False

        self.ride: Optional[Ride] = None
        self.error: Optional[str] = None

    @property
    def ride_id(self) -> str:
        return self._ride_id

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "RideStatusSubscription":
        if self._disposed:
            raise RuntimeError("Cannot restart a disposed ride status subscription")
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"ride-status-{self._ride_id}")
        return self

    async def _run(self) -> None:
        await self.poll_once()
        while not self._disposed:
            await self._sleep(self._interval)
            if self._disposed:
                break
            await self.poll_once()

    async def _fetch(self) -> Optional[Ride]:
        try:
            response = await call_api(self._api.get_ride_status(self._ride_id))
        except PurdueRideError as e:
            self.error = e.message
            logger.warning(f"Ride status poll for {self._ride_id} failed: {e.message}")
            return None

        if not response.success:
            self.error = response.error.message if response.error else "Failed to fetch ride status"
            logger.warning(f"Ride status poll for {self._ride_id} failed: {self.error}")
            return None

        self.error = None
        return response.data

    async def poll_once(self) -> Optional[Ride]:
        """
        Fetch the status once, notifying if it changed since the last fetch.

        The first successful fetch only records the status.
        """
        ride = await self._fetch()
        if ride is None:
            return None

        previous = self.ride
        self.ride = ride
        if previous is not None and previous.status != ride.status:
            self._announce(ride)
            if self._on_status_change is not None:
                self._on_status_change(ride)
        return ride

    def _announce(self, ride: Ride) -> None:
        logger.info(f"Ride {ride.id} status changed to {ride.status.value}")
        self._notifications.add_notification(
            STATUS_MESSAGES.get(ride.status, f"Ride status changed to {ride.status.value}"),
            type=STATUS_NOTIFICATION_TYPES.get(ride.status, NotificationType.INFO),
            title="Ride Status Update",
            dismiss_timeout=STATUS_UPDATE_TIMEOUT_MS,
        )

        if (
            ride.status == RideStatus.IN_PROGRESS
            and ride.estimated_arrival is not None
            and _aware(ride.estimated_arrival) - _aware(self._clock()) < APPROACHING_WINDOW
        ):
            self._notifications.add_notification(
                f"Your driver {ride.driver_name + ' ' if ride.driver_name else ''}is approaching your location. "
                "Please be ready for pickup!",
                type=NotificationType.INFO,
                title="Driver Approaching",
                dismiss_timeout=DRIVER_APPROACHING_TIMEOUT_MS,
            )

    def dispose(self) -> None:
        """Stop polling. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.debug(f"Stopped watching ride {self._ride_id}")

    async def aclose(self) -> None:
        """Dispose and wait for the polling task to finish."""
        self.dispose()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "RideStatusSubscription":
        return self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def watch_ride_status(
    api: IRideApi,
    ride_id: str,
    notifications: NotificationQueue,
    on_status_change: Optional[StatusListener] = None,
    interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Sleeper = asyncio.sleep,
    clock: Callable[[], datetime] = utc_now,
) -> RideStatusSubscription:
    """
    Start watching a ride. Must be called from a running event loop.

    Returns:
        The started subscription; call dispose() to stop it
    """
    return RideStatusSubscription(
        api,
        ride_id,
        notifications,
        on_status_change=on_status_change,
        interval=interval,
        sleep=sleep,
        clock=clock,
    ).start()
