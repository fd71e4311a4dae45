"""
Notification queue.

Holds notifications in insertion order. Each auto-dismissing notification
schedules its own removal when it is added; removals are by id, so a timer
that fires after the notification is already gone does nothing.
"""

import logging
import uuid
from typing import Optional

from shared.models import now_ms

from .interfaces import IScheduler
from .models import DEFAULT_DISMISS_TIMEOUT_MS, Notification, NotificationType
from .scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)


def generate_notification_id() -> str:
    return f"notification-{now_ms()}-{uuid.uuid4().hex[:9]}"


class NotificationQueue:
    """Ordered collection of transient notifications."""

    def __init__(self, scheduler: Optional[IScheduler] = None):
        self._scheduler = scheduler or AsyncioScheduler()
        self._notifications: list[Notification] = []

    @property
    def notifications(self) -> list[Notification]:
        """Snapshot of the queue in insertion order."""
        return list(self._notifications)

    def __len__(self) -> int:
        return len(self._notifications)

    def add_notification(
        self,
        message: str,
        type: NotificationType = NotificationType.INFO,
        title: Optional[str] = None,
        auto_dismiss: bool = True,
        dismiss_timeout: int = DEFAULT_DISMISS_TIMEOUT_MS,
    ) -> Notification:
        """
        Append a notification.

        Args:
            message: Body text
            type: success, error, info or warning
            title: Optional heading
            auto_dismiss: Remove automatically after dismiss_timeout
            dismiss_timeout: Lifetime in milliseconds when auto_dismiss is set

        Returns:
            The stored notification, with its generated id
        """
        notification = Notification(
            id=generate_notification_id(),
            type=type,
            message=message,
            title=title,
            auto_dismiss=auto_dismiss,
            dismiss_timeout=dismiss_timeout,
        )
        self._notifications.append(notification)
        logger.debug(f"Added {notification.type.value} notification {notification.id}")

        if notification.auto_dismiss:
            self._scheduler.call_later(
                notification.dismiss_timeout,
                lambda: self.remove_notification(notification.id),
            )
        return notification

    def remove_notification(self, notification_id: str) -> None:
        """Remove by id; unknown ids are ignored."""
        self._notifications = [n for n in self._notifications if n.id != notification_id]

    def clear_all_notifications(self) -> None:
        """Empty the queue. Pending dismiss timers later fire as no-ops."""
        self._notifications = []
