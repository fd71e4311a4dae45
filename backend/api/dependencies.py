"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Replacing the mock backend with an HTTP client for the real one only
requires changing the ride_api property here.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.mock_api.interfaces import IRideApi
    from modules.mock_api.store import MockDataStore
    from modules.notifications.queue import NotificationQueue


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._data_store: "MockDataStore | None" = None
        self._ride_api: "IRideApi | None" = None
        self._notifications: "NotificationQueue | None" = None

    @property
    def data_store(self) -> "MockDataStore":
        """Get the mock dataset, seeded with the configured sizes."""
        if self._data_store is None:
            from modules.mock_api.store import MockDataStore
            from shared.config import get_settings
            settings = get_settings()
            self._data_store = MockDataStore.seeded(
                users=settings.mock_seed_users,
                rides=settings.mock_seed_rides,
                requests=settings.mock_seed_requests,
            )
        return self._data_store

    @property
    def ride_api(self) -> "IRideApi":
        """Get the ride backend instance."""
        if self._ride_api is None:
            from modules.mock_api.service import MockApiService
            self._ride_api = MockApiService(self.data_store)
        return self._ride_api

    @property
    def notifications(self) -> "NotificationQueue":
        """Get the server-side notification queue."""
        if self._notifications is None:
            from modules.notifications.queue import NotificationQueue
            self._notifications = NotificationQueue()
        return self._notifications

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._data_store = None
        self._ride_api = None
        self._notifications = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_ride_api() -> "IRideApi":
    """FastAPI dependency for the ride backend."""
    return get_container().ride_api


def get_data_store() -> "MockDataStore":
    """FastAPI dependency for the mock dataset."""
    return get_container().data_store


def get_notifications() -> "NotificationQueue":
    """FastAPI dependency for the notification queue."""
    return get_container().notifications
