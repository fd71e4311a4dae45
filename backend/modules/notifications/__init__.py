"""
Notifications module.

Public API:
- NotificationQueue: Ordered, self-expiring notifications
- IScheduler / AsyncioScheduler: Timer source used for auto-dismiss
- Notification / NotificationType: Models
"""

from .interfaces import IScheduler, ITimerHandle
from .models import DEFAULT_DISMISS_TIMEOUT_MS, Notification, NotificationType
from .scheduler import AsyncioScheduler
from .queue import NotificationQueue

__all__ = [
    "NotificationQueue",
    "IScheduler",
    "ITimerHandle",
    "AsyncioScheduler",
    "Notification",
    "NotificationType",
    "DEFAULT_DISMISS_TIMEOUT_MS",
]
