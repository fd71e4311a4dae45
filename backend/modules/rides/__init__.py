"""
Rides module.

Public API:
- watch_ride_status: Start polling a ride and notifying on changes
- RideStatusSubscription: Disposable handle for a running watch
- format_time_until: Human-readable ETA
"""

from .watcher import (
    DEFAULT_POLL_INTERVAL,
    STATUS_MESSAGES,
    RideStatusSubscription,
    format_time_until,
    watch_ride_status,
)

__all__ = [
    "watch_ride_status",
    "RideStatusSubscription",
    "format_time_until",
    "DEFAULT_POLL_INTERVAL",
    "STATUS_MESSAGES",
]
